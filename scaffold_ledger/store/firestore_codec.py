"""
Conversion between Python values and Firestore REST typed values.

The Firestore v1 REST API wraps every field value in a one-key object
naming its type ({"stringValue": "x"}, {"integerValue": "3"}, ...). These
helpers translate documents in both directions and build the structured
query and write payloads used by ``FirestoreDocumentStore``.
"""

import base64
import datetime as dt
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from scaffold_ledger.store.base import SERVER_TIMESTAMP, FieldFilter, OrderBy

_FRACTION_RE = re.compile(r"\.(\d+)")


def encode_value(value: Any) -> Dict[str, Any]:
    """
    Encode a Python value as a Firestore typed value.

    Args:
        value: Python value (None, bool, int, float, Decimal, str, datetime,
            date, bytes, list, tuple, dict or Enum)

    Returns:
        Typed value dictionary

    Raises:
        TypeError: If the value type has no Firestore representation
    """
    if value is None:
        return {"nullValue": None}
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, (float, Decimal)):
        return {"doubleValue": float(value)}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dt.datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, dt.date):
        return {"stringValue": value.isoformat()}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def decode_value(typed: Dict[str, Any]) -> Any:
    """
    Decode a Firestore typed value into a Python value.

    Integers come back as int, doubles as float and timestamps as
    timezone-aware datetimes. Reference and geo point values are returned
    in their raw REST form.
    """
    if "nullValue" in typed:
        return None
    if "booleanValue" in typed:
        return bool(typed["booleanValue"])
    if "integerValue" in typed:
        return int(typed["integerValue"])
    if "doubleValue" in typed:
        return float(typed["doubleValue"])
    if "stringValue" in typed:
        return typed["stringValue"]
    if "timestampValue" in typed:
        return parse_timestamp(typed["timestampValue"])
    if "bytesValue" in typed:
        return base64.b64decode(typed["bytesValue"])
    if "arrayValue" in typed:
        return [decode_value(item) for item in typed["arrayValue"].get("values", [])]
    if "mapValue" in typed:
        return decode_fields(typed["mapValue"].get("fields", {}))
    if "referenceValue" in typed:
        return typed["referenceValue"]
    if "geoPointValue" in typed:
        return dict(typed["geoPointValue"])
    raise ValueError(f"Unrecognized Firestore value: {typed!r}")


def encode_fields(data: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Encode a document body, skipping SERVER_TIMESTAMP sentinels."""
    return {
        key: encode_value(value)
        for key, value in data.items()
        if value is not SERVER_TIMESTAMP
    }


def decode_fields(fields: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


def server_timestamp_fields(data: Dict[str, Any]) -> List[str]:
    """Names of the fields that carry the SERVER_TIMESTAMP sentinel."""
    return [key for key, value in data.items() if value is SERVER_TIMESTAMP]


def format_timestamp(value: dt.datetime) -> str:
    """Render a datetime as RFC 3339 UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    value = value.astimezone(dt.timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(text: str) -> dt.datetime:
    """
    Parse an RFC 3339 timestamp as returned by Firestore.

    Firestore emits nanosecond precision and a "Z" suffix; the fraction is
    truncated to microseconds.

    Example:
        >>> parse_timestamp("2024-03-05T10:11:12.123456789Z")
        datetime.datetime(2024, 3, 5, 10, 11, 12, 123456, tzinfo=datetime.timezone.utc)
    """
    normalized = text.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION_RE.sub(
        lambda match: "." + match.group(1)[:6].ljust(6, "0"), normalized, count=1
    )
    return dt.datetime.fromisoformat(normalized)


def document_id_from_name(name: str) -> str:
    """Last path segment of a full document resource name."""
    return name.rsplit("/", 1)[-1]


def _field_filter(field_filter: FieldFilter) -> Dict[str, Any]:
    field_ref = {"fieldPath": field_filter.field}
    if field_filter.value is None:
        return {"unaryFilter": {"field": field_ref, "op": "IS_NULL"}}
    return {
        "fieldFilter": {
            "field": field_ref,
            "op": "EQUAL",
            "value": encode_value(field_filter.value),
        }
    }


def build_structured_query(
    collection: str,
    filters: Sequence[FieldFilter] = (),
    order_by: Optional[OrderBy] = None,
) -> Dict[str, Any]:
    """
    Build a ``structuredQuery`` body for ``documents:runQuery``.

    Args:
        collection: Collection id
        filters: Equality filters combined with AND
        order_by: Optional ordering

    Returns:
        Request body for runQuery
    """
    query: Dict[str, Any] = {"from": [{"collectionId": collection}]}

    clauses = [_field_filter(f) for f in filters]
    if len(clauses) == 1:
        query["where"] = clauses[0]
    elif clauses:
        query["where"] = {"compositeFilter": {"op": "AND", "filters": clauses}}

    if order_by is not None:
        query["orderBy"] = [
            {
                "field": {"fieldPath": order_by.field},
                "direction": "DESCENDING" if order_by.descending else "ASCENDING",
            }
        ]

    return {"structuredQuery": query}


def build_write(
    document_name: str,
    data: Dict[str, Any],
    merge: bool = False,
    must_exist: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Build one entry of a ``documents:commit`` writes list.

    Args:
        document_name: Full resource name of the target document
        data: Fields to write; SERVER_TIMESTAMP values become transforms
        merge: Only touch the given fields (update mask) instead of replacing
        must_exist: Precondition on the document's existence, if any

    Returns:
        Write dictionary
    """
    fields = encode_fields(data)
    write: Dict[str, Any] = {"update": {"name": document_name, "fields": fields}}

    if merge:
        write["updateMask"] = {"fieldPaths": sorted(fields)}

    transforms = server_timestamp_fields(data)
    if transforms:
        write["updateTransforms"] = [
            {"fieldPath": key, "setToServerValue": "REQUEST_TIME"}
            for key in transforms
        ]

    if must_exist is not None:
        write["currentDocument"] = {"exists": must_exist}

    return write
