"""JSON Schema for distribution definition and package-list documents.

This is the structural gate of the loader: a document that does not match
is rejected before any objects are built from it. Architecture blocks are
keyed by canonical architecture name; any other unknown top-level key is
rejected.
"""

CANONICAL_ARCHITECTURES = ("x86_64", "aarch64", "ppc64le", "s390x")
ARCHITECTURE_KEY_PATTERN = "^(" + "|".join(CANONICAL_ARCHITECTURES) + ")$"

PACKAGE_SCHEMA: dict = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "summary": {"type": "string"},
    },
}

REPOSITORY_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "baseurl": {"type": "string", "minLength": 1},
        "metalink": {"type": "string", "minLength": 1},
        "rhsm": {"type": "boolean", "default": False},
        "image_type_tags": {
            "type": "array",
            "items": {"type": "string"},
        },
    },
}

ARCHITECTURE_SCHEMA: dict = {
    "type": "object",
    "required": ["image_types", "repositories"],
    "properties": {
        "image_types": {
            "type": "array",
            "items": {"type": "string"},
        },
        "repositories": {
            "type": "array",
            "items": REPOSITORY_SCHEMA,
        },
        "packages": {
            "type": "array",
            "items": PACKAGE_SCHEMA,
        },
    },
}

DISTRIBUTION_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Distribution definition",
    "type": "object",
    "required": ["distribution"],
    "properties": {
        "distribution": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {
                    "type": "string",
                    "pattern": "^[a-z0-9][a-z0-9._-]*$",
                },
                "description": {"type": "string"},
                "restricted_access": {"type": "boolean", "default": False},
                "no_package_list": {"type": "boolean", "default": False},
            },
        },
        "module_platform_id": {"type": "string"},
        "oscap_name": {"type": "string"},
    },
    "patternProperties": {ARCHITECTURE_KEY_PATTERN: ARCHITECTURE_SCHEMA},
    "additionalProperties": False,
}

# Package lists map architecture name to that architecture's index.
PACKAGE_LIST_SCHEMA: dict = {
    "type": "object",
    "patternProperties": {
        ARCHITECTURE_KEY_PATTERN: {
            "type": "array",
            "items": PACKAGE_SCHEMA,
        },
    },
    "additionalProperties": False,
}
