"""
Template formatting helpers
"""
from datetime import datetime
from typing import Any, Mapping, Optional
import html

from pydantic import BaseModel, TypeAdapter, ValidationError

_datetime_adapter = TypeAdapter(datetime)

def escape(value: Any) -> str:
    """Escape a record value for template output"""
    if value is None:
        return ""
    return html.escape(str(value))

def resolve_path(record: Any, path: str) -> Optional[Any]:
    """Get a value from nested records by dot-notation path, or None if any part is missing"""
    pointer = record
    for part in path.split("."):
        if isinstance(pointer, BaseModel):
            pointer = getattr(pointer, part, None)
        elif isinstance(pointer, Mapping):
            pointer = pointer.get(part)
        elif isinstance(pointer, list) and part.isdigit() and int(part) < len(pointer):
            pointer = pointer[int(part)]
        else:
            return None
        if pointer is None:
            return None
    return pointer

def currency(record: Any, path: str) -> str:
    """
    Format a currency value found at a dot-notation path in a record

    Args:
        record: Record (mapping) holding the value
        path: Field path, e.g. "shipping.price"

    Returns:
        Formatted amount like "$1,234.50", or "$0.00" if the path does not resolve
    """
    value = resolve_path(record, path)
    try:
        amount = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        amount = 0.0
    # TODO: render using record["currency"] once non-USD stores are supported
    return f"${amount:,.2f}"

def date(value: Any) -> str:
    """Format an ISO string, datetime or unix timestamp as YYYY-MM-DD; empty if unparseable"""
    if value is None or value == "":
        return ""
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        return ""
    return parsed.strftime("%Y-%m-%d")
