"""OpenAPI metadata and customization utilities.

Adds tag descriptions and documents the 429 rate-limit response on every
operation, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Restaurants",
        "description": "CRUD endpoints over the restaurants resource.",
    },
    {
        "name": "Info",
        "description": "Fixed-text info endpoints and the health check.",
    },
]

_ERROR_SCHEMA = {
    "type": "object",
    "properties": {"error": {"type": "string"}},
    "required": ["error"],
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and error responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        components.setdefault("schemas", {}).setdefault("ErrorResponse", _ERROR_SCHEMA)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                responses = method_obj.setdefault("responses", {})
                responses.setdefault(
                    "429",
                    {
                        "description": "Rate limit exceeded",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/ErrorResponse"}
                            }
                        },
                    },
                )

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
