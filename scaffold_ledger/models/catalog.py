"""Catalog item model for usage-counted subcategories and vendors."""

from typing import Optional

from pydantic import Field, field_validator

from scaffold_ledger.models.base import BaseDataModel


class CatalogItem(BaseDataModel):
    """A named subcategory or vendor with a popularity counter.

    Attributes:
        id: Document id
        name: Display name, unique case-insensitively within its collection
        category_id: Parent category (subcategories only)
        usage_count: Number of records currently referencing the name
    """

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    category_id: Optional[str] = Field(None, alias="categoryId")
    usage_count: int = Field(0, ge=0, alias="usageCount")

    @field_validator("usage_count", mode="before")
    @classmethod
    def coerce_usage_count(cls, v) -> int:
        """Read missing, non-numeric or negative counts as zero."""
        try:
            count = int(v or 0)
        except (TypeError, ValueError):
            return 0
        return max(count, 0)
