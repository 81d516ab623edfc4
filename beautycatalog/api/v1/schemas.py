from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CatalogProductSchema(_CamelSchema):
    id: str
    slug: str | None = None
    name: str
    description: str | None = None
    category: str | None = None
    image: str | None = None
    customer_price: float = 0.0
    vendor_payout: float = 0.0
    sku: str | None = None
    is_active: bool


class ServiceProductSchema(_CamelSchema):
    id: str
    quantity: int = 1
    optional: bool = True
    product_catalog: CatalogProductSchema


class CatalogServiceSchema(_CamelSchema):
    id: str
    slug: str | None = None
    name: str
    description: str | None = None
    duration: int = 60
    customer_price: float = 0.0
    vendor_payout: float = 0.0
    category: str | None = None
    icon: str | None = None
    allows_products: bool = False
    is_active: bool
    products: list[ServiceProductSchema] = Field(default_factory=list)
