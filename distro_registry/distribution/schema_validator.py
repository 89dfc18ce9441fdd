"""Schema validator — structural validation of parsed definition documents."""

from __future__ import annotations

import re


def validate_schema(data, schema: dict) -> list[str]:
    """Validate a parsed document against a JSON Schema node.

    Args:
        data: The parsed YAML/JSON document.
        schema: One of the schemas from ``distro_registry.distribution.schema``.

    Returns:
        List of error messages in document order. Empty list means valid.
    """
    issues: list[str] = []
    _validate_node(data, schema, "", issues)
    return issues


def _validate_node(data, schema: dict, path: str, issues: list[str]):
    """Recursively validate data against a JSON Schema node."""
    schema_type = schema.get("type")

    if schema_type and not _type_matches(data, schema_type):
        issues.append(f"{path or '/'}: expected type '{schema_type}', got {type(data).__name__}")
        return  # Don't recurse into wrong types

    if schema_type == "string" and isinstance(data, str):
        min_len = schema.get("minLength", 0)
        if len(data) < min_len:
            issues.append(f"{path or '/'}: string too short (min {min_len}, got {len(data)})")
        if "pattern" in schema and not re.match(schema["pattern"], data):
            issues.append(f"{path or '/'}: string '{data}' does not match pattern '{schema['pattern']}'")

    if schema_type == "object" and isinstance(data, dict):
        for req in schema.get("required", []):
            if req not in data:
                issues.append(f"{path or '/'}: missing required property '{req}'")

        props = schema.get("properties", {})
        patterns = schema.get("patternProperties", {})
        extra = schema.get("additionalProperties")
        for key, value in data.items():
            if key in props:
                _validate_node(value, props[key], f"{path}.{key}", issues)
                continue
            matched = [s for p, s in patterns.items() if re.match(p, str(key))]
            if matched:
                _validate_node(value, matched[0], f"{path}.{key}", issues)
            elif extra is False:
                issues.append(f"{path or '/'}: unexpected property '{key}'")
            elif isinstance(extra, dict):
                _validate_node(value, extra, f"{path}.{key}", issues)

    if schema_type == "array" and isinstance(data, list):
        items_schema = schema.get("items")
        if items_schema:
            for i, item in enumerate(data):
                _validate_node(item, items_schema, f"{path}[{i}]", issues)


def _type_matches(data, schema_type: str) -> bool:
    """Check if data matches the expected JSON Schema type."""
    type_map = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
        "null": type(None),
    }
    expected = type_map.get(schema_type)
    if expected is None:
        return True
    # bool is a subclass of int, but YAML `true` is not a valid integer
    if schema_type in ("integer", "number") and isinstance(data, bool):
        return False
    return isinstance(data, expected)
