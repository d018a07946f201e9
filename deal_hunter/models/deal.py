"""
Deal Hunter — Deal record

The canonical shape every data source is normalized into. Python code uses
snake_case attributes; the camelCase aliases are the wire format shared with
the UI and requested from the LLM providers.

Known gap: `savings == original_price - sale_price` holds for mock deals by
construction but is never checked for provider-sourced deals.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Deal(BaseModel):
    """One normalized product discount."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    category: str
    # Prices stay strings to preserve the source formatting
    original_price: str
    sale_price: str
    savings: str
    discount_percent: int = Field(ge=0)
    rating: str
    reviews: int = Field(ge=0)
    stock: int = Field(ge=0)
    seller: str
    shipping_cost: str
    product_url: str = "#"
    image_url: str

    def to_wire(self) -> dict:
        """camelCase dict as it crosses the UI boundary."""
        return self.model_dump(by_alias=True)
