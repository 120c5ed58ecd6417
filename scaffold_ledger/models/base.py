"""Base model for all data models in the ledger core.

This module provides a base Pydantic model with common configuration
and helpers to convert between models and store documents.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict

ModelT = TypeVar("ModelT", bound="BaseDataModel")


def _to_store_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _to_store_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_store_value(item) for item in value]
    return value


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Python attributes are snake_case; store documents use camelCase, so
    every model declares field aliases and accepts either spelling.
    Unknown document fields are ignored because the store collections are
    shared with other parts of the application.

    Example:
        >>> class Vendor(BaseDataModel):
        ...     name: str
        ...     usage_count: int = Field(0, alias="usageCount")
        >>> Vendor.from_document("v1", {"name": "Acme", "usageCount": 2})
        Vendor(name='Acme', usage_count=2)
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="ignore",
        frozen=False,
        populate_by_name=True,
        use_enum_values=True,
    )

    @classmethod
    def from_document(
        cls: Type[ModelT], document_id: Optional[str], data: Dict[str, Any]
    ) -> ModelT:
        """Build a model from a store document.

        Args:
            document_id: Store-assigned id, injected as ``id`` when provided
            data: Raw document fields (camelCase)

        Returns:
            Validated model instance
        """
        payload = dict(data)
        if document_id is not None:
            payload["id"] = document_id
        return cls.model_validate(payload)

    def to_document(
        self, exclude: Optional[set] = None, exclude_none: bool = True
    ) -> Dict[str, Any]:
        """Serialize to a store document (camelCase, numbers as floats).

        ``id`` is never written because it is the document key. Pass
        ``exclude_none=False`` to write explicit nulls, which clears fields
        on a partial update.
        """
        excluded = {"id"} | (exclude or set())
        data = self.model_dump(
            by_alias=True, exclude_none=exclude_none, exclude=excluded
        )
        return _to_store_value(data)
