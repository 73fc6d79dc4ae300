from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PurchaseRequest(BaseSchema):
    client_id: Optional[str] = None


class PurchaseResponse(BaseSchema):
    message: str
    total_purchases: int
    retry_after_seconds: int


class RejectionResponse(BaseSchema):
    message: str
    retry_after_seconds: int


class ClientStatusResponse(BaseSchema):
    client_id: str
    can_purchase: bool
    retry_after_seconds: int
    total_purchases: int


class MessageResponse(BaseSchema):
    message: str


class HealthResponse(BaseSchema):
    status: str
    redis: Optional[str] = None
    message: Optional[str] = None
