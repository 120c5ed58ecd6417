"""Unit tests for base model functionality."""

from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import Field

from scaffold_ledger.models.base import BaseDataModel


class Color(str, Enum):
    RED = "red"


class Sample(BaseDataModel):
    id: Optional[str] = None
    display_name: str = Field(..., alias="displayName")
    price: Decimal = Decimal("0")
    color: Color = Color.RED
    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None


class TestBaseModelDocuments:
    """Test conversion between models and store documents."""

    def test_accepts_both_spellings(self):
        assert Sample(displayName="a").display_name == "a"
        assert Sample(display_name="b").display_name == "b"

    def test_from_document_injects_id(self):
        model = Sample.from_document("doc-1", {"displayName": "a", "extra": 1})
        assert model.id == "doc-1"

    def test_to_document(self):
        model = Sample(id="doc-1", display_name="a", price=Decimal("9.99"))

        document = model.to_document()

        assert document == {
            "displayName": "a",
            "price": 9.99,
            "color": "red",
            "tags": [],
        }

    def test_to_document_with_explicit_nulls(self):
        document = Sample(display_name="a").to_document(exclude_none=False)
        assert document["note"] is None
        assert "id" not in document

    def test_to_document_exclude(self):
        document = Sample(display_name="a").to_document(exclude={"tags"})
        assert "tags" not in document

    def test_validate_assignment(self):
        model = Sample(display_name="a")
        model.price = "12.50"
        assert model.price == Decimal("12.50")
