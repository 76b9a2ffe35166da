"""Pydantic v2 models for the feature-flag document.

The document is the hand-curated source of truth: the product list, the
customers, the flag catalog grouped by category, and each customer's
per-product flag configuration.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_DOCUMENT_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
    "extra": "ignore",
}


class Product(BaseModel):
    """A purchasable product."""
    key: str
    name: str

    model_config = _DOCUMENT_CONFIG


class Customer(BaseModel):
    """A customer and the products it has purchased."""
    key: str
    name: str
    ehr: str | None = None
    products: list[str] = Field(default_factory=list)

    model_config = _DOCUMENT_CONFIG

    @field_validator("products", mode="before")
    @classmethod
    def null_products_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class FlagDefinition(BaseModel):
    """One flag of the catalog."""
    key: str
    name: str
    applicable_products: Literal["all"] | list[str] = "all"

    model_config = _DOCUMENT_CONFIG

    def applies_to(self, product_key: str) -> bool:
        """Return whether the flag exists for *product_key*."""
        if self.applicable_products == "all":
            return True
        return product_key in self.applicable_products


class ProductConfig(BaseModel):
    """A customer's configuration block for one product.

    Flag values are tri-state: only the literals ``True`` and ``False``
    count as configured, a missing key (or any other value) is absent.
    """
    flags: dict[str, Any] = Field(default_factory=dict)
    notes: dict[str, Any] = Field(default_factory=dict)

    model_config = _DOCUMENT_CONFIG

    @field_validator("flags", "notes", mode="before")
    @classmethod
    def null_maps_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def is_enabled(self, flag_key: str) -> bool:
        return self.flags.get(flag_key) is True

    def is_disabled(self, flag_key: str) -> bool:
        return self.flags.get(flag_key) is False


# customer key -> product key -> configuration block
CustomerConfiguration = dict[str, ProductConfig]


class FlagDocument(BaseModel):
    """The parsed ``feature-flags.json`` document."""
    products: list[Product] = Field(default_factory=list)
    customers: list[Customer] = Field(default_factory=list)
    flag_definitions: dict[str, list[FlagDefinition]] = Field(default_factory=dict)
    configurations: dict[str, CustomerConfiguration] = Field(default_factory=dict)

    model_config = _DOCUMENT_CONFIG

    def get_customer(self, customer_key: str) -> Customer | None:
        for customer in self.customers:
            if customer.key == customer_key:
                return customer
        return None

    def configuration_for(self, customer_key: str) -> CustomerConfiguration:
        """Return the customer's product blocks, empty when unconfigured."""
        return self.configurations.get(customer_key, {})

    def product_name(self, product_key: str) -> str:
        """Return the display name of a product, or the key itself."""
        for product in self.products:
            if product.key == product_key:
                return product.name
        return product_key
