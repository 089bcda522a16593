"""
Commerce Records
Typed views over Schema API records; unknown remote fields are kept as extras
"""
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storefront.schema.client import SchemaApiError, has_errors

class Record(BaseModel):
    """Base for remote records"""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None

class Session(Record):
    """Server-side state linking the visitor to a cart and account"""
    account_id: Optional[str] = None
    cart_id: Optional[str] = None

class ShippingService(BaseModel):
    """A shipping option offered by the remote rating engine"""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None

class ShipmentRating(BaseModel):
    model_config = ConfigDict(extra="allow")

    services: List[ShippingService] = Field(default_factory=list)

class Cart(Record):
    account_id: Optional[str] = None
    account: Optional[Dict[str, Any]] = None
    shipping: Optional[Dict[str, Any]] = None
    billing: Optional[Dict[str, Any]] = None
    shipment_rating: Optional[ShipmentRating] = None
    coupon_code: Optional[str] = None
    comments: Optional[str] = None

class Account(Record):
    type: Optional[str] = None
    group: Optional[str] = None
    email: Optional[str] = None
    password: Optional[Any] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    contacts: Optional[List[Dict[str, Any]]] = None
    shipping: Optional[Dict[str, Any]] = None
    billing: Optional[Dict[str, Any]] = None

class Order(Record):
    account_id: Optional[str] = None
    number: Optional[str] = None

class FieldError(BaseModel):
    """Error reported for a single field path"""
    message: str
    code: str

class Failed(BaseModel):
    """
    Failure outcome of a workflow step
    errors maps a dot-separated field path to {message, code}; remote errors are kept verbatim
    """
    errors: Dict[str, Any]

class Done(BaseModel):
    """Success outcome of a workflow step, with an optional redirect for the caller"""
    ok: bool = True
    redirect: Optional[str] = None

Outcome = Union[Done, Failed]

RecordT = TypeVar("RecordT", bound=Record)

def load_record(result: Any, model: Type[RecordT]) -> RecordT:
    """Validate a raw API record; a record that does not fit the model is an upstream fault"""
    try:
        return model.model_validate(result)
    except ValidationError as e:
        raise SchemaApiError(f"Unexpected {model.__name__} record from Schema: {e.error_count()} invalid field(s)") from e

def parse_record(result: Any, model: Type[RecordT]) -> Union[RecordT, Failed]:
    """
    Turn a raw API response into a typed record, or Failed if it carries errors

    Args:
        result: Decoded API response (record, error record or None)
        model: Record class to validate into

    Returns:
        Record instance (empty if result was None) or Failed
    """
    if has_errors(result):
        return Failed(errors=result["errors"])
    return load_record(result or {}, model)
