"""
Utility functions for turning host data into validated records.

Provides helpers for:
- Parsing principals and record collections from plain mappings
- Translating pydantic validation failures into HierarchyValidationError
"""

from typing import Any, Iterable, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .database import Identity
from .errors import HierarchyValidationError


T = TypeVar("T", bound=BaseModel)


def _first_error_field(error: ValidationError, prefix: str = "") -> HierarchyValidationError:
    """Build a HierarchyValidationError from the first pydantic error."""
    details = error.errors()
    if not details:
        return HierarchyValidationError(prefix or "record", str(error))
    first = details[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    field = f"{prefix}.{loc}" if prefix and loc else (loc or prefix or "record")
    return HierarchyValidationError(field, first.get("msg", "invalid value"))


def parse_record(model: Type[T], data: Union[T, Mapping[str, Any]], field: str = "") -> T:
    """Validate a single record, naming the offending field on failure."""
    if isinstance(data, model):
        return data
    if data is None:
        raise HierarchyValidationError(field or model.__name__.lower(), "record is required")
    try:
        if isinstance(data, Mapping):
            return model.model_validate(dict(data))
        return model.model_validate(data, from_attributes=True)
    except ValidationError as e:
        raise _first_error_field(e, field) from None


def parse_records(model: Type[T], rows: Iterable[Union[T, Mapping[str, Any]]], field: str = "") -> List[T]:
    """Validate a collection; the field path includes the row index."""
    parsed: List[T] = []
    for index, row in enumerate(rows or []):
        prefix = f"{field}[{index}]" if field else f"[{index}]"
        parsed.append(parse_record(model, row, prefix))
    return parsed


def parse_identity(data: Union[Identity, Mapping[str, Any]], field: str = "principal") -> Identity:
    """Validate a principal or identity record."""
    return parse_record(Identity, data, field)
