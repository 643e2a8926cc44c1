"""
Product domain fact.

Product data as sent by the shop, with its two Klaviyo renderings: flattened
event properties (for 'Viewed Product') and the catalog-item resource.

Dependencies: pydantic
System role: Catalog and product-view payloads
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CATALOG_SCOPE = "$custom"
DEFAULT_CATALOG_LIST = "$default"
CATALOG_ID_SEPARATOR = ":::"


def build_catalog_item_id(
    product_id: int | str,
    scope: str = DEFAULT_CATALOG_SCOPE,
    catalog: str = DEFAULT_CATALOG_LIST,
) -> str:
    """
    Synthesize the composite catalog item id.

    Example:
        >>> build_catalog_item_id(42)
        '$custom:::$default:::42'
    """
    return CATALOG_ID_SEPARATOR.join((scope, catalog, str(product_id)))


def _drop_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in values.items()
        if value is not None and value != [] and value != {}
    }


class Product(BaseModel):
    """Shop product. Input keys follow the shop payload (product_id, product_name, ...)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int | str = Field(alias="product_id")
    title: str = Field(alias="product_name")
    price: float
    currency: str = "EUR"
    url: str | None = Field(default=None, alias="product_url")
    image_url: str | None = None
    description: str | None = None
    categories: list[str] = Field(default_factory=list)
    sku: str | None = None
    custom_attributes: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Product":
        """Build a product from a validated shop payload."""
        fields = dict(data)
        for key in ("currency", "categories", "custom_attributes"):
            if fields.get(key) is None:
                fields.pop(key, None)
        return cls.model_validate(fields)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe form using the shop's field names."""
        return self.model_dump(mode="json", by_alias=True)

    def catalog_item_id(
        self,
        scope: str = DEFAULT_CATALOG_SCOPE,
        catalog: str = DEFAULT_CATALOG_LIST,
    ) -> str:
        """Composite id addressing this product's catalog item."""
        return build_catalog_item_id(self.id, scope, catalog)

    def to_event_properties(self) -> dict[str, Any]:
        """Flattened subset used as 'Viewed Product' event properties."""
        return _drop_empty(
            {
                "product_id": self.id,
                "product_name": self.title,
                "price": self.price,
                "currency": self.currency,
                "product_url": self.url,
                "image_url": self.image_url,
                "categories": self.categories,
                "sku": self.sku,
            }
        )

    def to_catalog_attributes(self) -> dict[str, Any]:
        """Attributes of the catalog-item resource."""
        attributes = {
            "external_id": str(self.id),
            "title": self.title,
            "price": self.price,
            "url": self.url,
            "image_full_url": self.image_url,
            "description": self.description,
            "published": True,
            "custom_metadata": {
                "currency": self.currency,
                "categories": self.categories,
                "sku": self.sku,
                **self.custom_attributes,
            },
        }
        return {key: value for key, value in attributes.items() if value is not None}

    def to_catalog_item(
        self,
        scope: str = DEFAULT_CATALOG_SCOPE,
        catalog: str = DEFAULT_CATALOG_LIST,
    ) -> dict[str, Any]:
        """
        Render the catalog-item resource.

        Args:
            scope: Catalog integration type
            catalog: Catalog type

        Returns:
            dict: JSON:API resource object (without the outer 'data' key)
        """
        return {
            "type": "catalog-item",
            "id": self.catalog_item_id(scope, catalog),
            "attributes": self.to_catalog_attributes(),
        }
