"""Encode/decode Python values to/from Firestore REST API 'fields' format."""

import base64
from datetime import datetime
from typing import Any

from fireprobe.shared.utils.datetime import from_rfc3339


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": "NULL_VALUE"}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": v.strftime("%Y-%m-%dT%H:%M:%S.%fZ")}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: _encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_value(v: Any) -> dict:
    """Encode one value (query filter operands)."""
    return _encode_value(v)


def encode_document(data: dict[str, Any]) -> dict:
    """Convert a Python dict to Firestore REST Document.fields format."""
    return {"fields": {k: _encode_value(v) for k, v in data.items()}}


def _decode_value(obj: dict) -> Any:
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        return from_rfc3339(obj["timestampValue"])
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "referenceValue" in obj:
        return obj["referenceValue"]
    if "geoPointValue" in obj:
        point = obj["geoPointValue"]
        return {"latitude": point.get("latitude", 0.0), "longitude": point.get("longitude", 0.0)}
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [_decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: _decode_value(x) for k, x in fields.items()}
    return None


def decode_document(document: dict | None) -> dict:
    """Convert a Firestore REST Document (with 'fields') to a Python dict."""
    if not document:
        return {}
    return {k: _decode_value(v) for k, v in (document.get("fields") or {}).items()}


def _quote_segment(segment: str) -> str:
    if segment.replace("_", "a").isalnum() and not segment[:1].isdigit():
        return segment
    escaped = segment.replace("\\", "\\\\").replace("`", "\\`")
    return f"`{escaped}`"


def field_paths(data: dict[str, Any], prefix: str = "", *, nested: bool = True) -> list[str]:
    """Return the updateMask field paths of data.

    With nested (merges) maps contribute their leaves so a merge never
    replaces a whole sibling map; empty maps are written as a unit.
    Without it only top-level keys are listed (update semantics), and a
    dotted key names a nested field: ``{"a.b": 1}`` masks ``a.b``.
    """
    paths: list[str] = []
    for key, value in data.items():
        if not nested:
            paths.append(".".join(_quote_segment(segment) for segment in key.split(".")))
            continue
        path = f"{prefix}{_quote_segment(key)}"
        if isinstance(value, dict) and value:
            paths.extend(field_paths(value, f"{path}."))
        else:
            paths.append(path)
    return paths


def expand_dotted_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Nest dotted top-level keys the way update() reads them.

    ``{"profile.age": 3, "name": "x"}`` -> ``{"profile": {"age": 3}, "name": "x"}``
    """
    expanded: dict[str, Any] = {}
    for key, value in data.items():
        *parents, leaf = key.split(".")
        target = expanded
        for segment in parents:
            child = target.get(segment)
            if not isinstance(child, dict):
                child = target[segment] = {}
            target = child
        target[leaf] = value
    return expanded
