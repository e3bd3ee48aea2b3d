"""
Lifegroup Hierarchy

Closure and authorization engine for a multi-tier volunteer organization:
role-bounded visibility over the org hierarchy, capability checks, and
progress and weekly-report roll-ups over what a principal may see.
"""

__version__ = "0.1.0"
