"""Shared Pydantic building blocks for API responses."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from app.services.parsers.values import format_amount


# Decimal internally, decimal string in JSON ("15.50", "0")
Money = Annotated[Decimal, PlainSerializer(format_amount, return_type=str)]


class ApiModel(BaseModel):
    """Response model rendered with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(ApiModel):
    error: str
