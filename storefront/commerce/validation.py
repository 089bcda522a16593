"""
Required-field validation for storefront form submissions

Errors are shaped like Schema API errors so callers can treat both the same way:
{"shipping.zip": {"message": "Required", "code": "REQUIRED"}}

A field is only flagged when it was submitted with an empty value. Fields that
are missing from the submission entirely are left to the API.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence, Tuple, Union

from storefront.commerce.models import FieldError

@dataclass(frozen=True)
class Field:
    """A field that must not be submitted empty"""
    name: str

@dataclass(frozen=True)
class Group:
    """Nested fields validated inside data[name]; digit names index into lists"""
    name: str
    fields: Sequence[Union[str, Field, "Group"]]

Spec = Sequence[Union[str, Field, Group]]

REQUIRED = FieldError(message="Required", code="REQUIRED")
INVALID = FieldError(message="Invalid", code="INVALID")

def _lookup(data: Any, key: str) -> Tuple[bool, Any]:
    """Get (present, value) for key in a mapping or, for digit keys, a list"""
    if isinstance(data, Mapping):
        if key in data:
            return True, data[key]
        return False, None
    if isinstance(data, Sequence) and not isinstance(data, str) and key.isdigit():
        index = int(key)
        if index < len(data):
            return True, data[index]
    return False, None

def validate_fields(data: Any, spec: Spec) -> Dict[str, Dict[str, str]]:
    """
    Validate submitted data against a required-field spec

    Args:
        data: Submitted payload (nested mappings/lists)
        spec: Field names, Field or Group entries

    Returns:
        Mapping of dot-separated field path -> {message, code}; empty when valid
    """
    errors: Dict[str, Dict[str, str]] = {}
    for entry in spec:
        if isinstance(entry, Group):
            _, nested = _lookup(data, entry.name)
            for path, error in validate_fields(nested, entry.fields).items():
                errors[f"{entry.name}.{path}"] = error
            continue

        name = entry.name if isinstance(entry, Field) else entry
        present, value = _lookup(data, name)
        if present and value is not None and not value:
            errors[name] = REQUIRED.model_dump()
    return errors
