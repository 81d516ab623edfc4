from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_create_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_update_body(self) -> dict[str, Any]:
        # Only what the caller set; an explicit None clears the field upstream.
        return self.model_dump(by_alias=True, exclude_unset=True)


class ServiceCreatePayload(_CamelPayload):
    name: str = Field(min_length=1)
    description: str | None = None
    duration: int | None = Field(default=None, gt=0)
    customer_price: float = Field(ge=0)
    vendor_payout: float = Field(ge=0)
    category: str | None = None
    icon: str | None = None
    allows_products: bool | None = None
    product_ids: list[str] | None = None
    slug: str | None = None


class ServiceUpdatePayload(_CamelPayload):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    duration: int | None = Field(default=None, gt=0)
    customer_price: float | None = Field(default=None, ge=0)
    vendor_payout: float | None = Field(default=None, ge=0)
    category: str | None = None
    icon: str | None = None
    allows_products: bool | None = None
    is_active: bool | None = None
    product_ids: list[str] | None = None
    slug: str | None = None


class ProductCreatePayload(_CamelPayload):
    name: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    image: str | None = None
    customer_price: float = Field(ge=0)
    vendor_payout: float = Field(ge=0)
    sku: str | None = None
    slug: str | None = None
    is_active: bool | None = None


class ProductUpdatePayload(_CamelPayload):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = None
    image: str | None = None
    customer_price: float | None = Field(default=None, ge=0)
    vendor_payout: float | None = Field(default=None, ge=0)
    sku: str | None = None
    slug: str | None = None
    is_active: bool | None = None
