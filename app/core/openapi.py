"""OpenAPI customization utilities.

Enriches the generated schema with tag descriptions and documents the
rate-limit response headers of the chat operation, keeping documentation
concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Chat",
        "description": "Persona assistant chat, limited per client IP.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

RATE_LIMIT_HEADERS: Dict[str, Any] = {
    "X-RateLimit-Remaining": {
        "description": "Requests left in the caller's current window.",
        "schema": {"type": "integer"},
    },
}

THROTTLED_HEADERS: Dict[str, Any] = {
    "Retry-After": {
        "description": "Seconds until the caller's window resets.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Limit": {
        "description": "Requests allowed per window.",
        "schema": {"type": "integer"},
    },
    "X-RateLimit-Reset": {
        "description": "UNIX time at which the window resets.",
        "schema": {"type": "integer"},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and quota headers."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.endswith("/chat"):
                continue
            operation = methods.get("post")
            if not isinstance(operation, dict):
                continue
            responses = operation.setdefault("responses", {})
            ok = responses.setdefault("200", {"description": "Successful Response"})
            ok.setdefault("headers", {}).update(RATE_LIMIT_HEADERS)
            throttled = responses.setdefault("429", {"description": "Too Many Requests"})
            throttled.setdefault("headers", {}).update(THROTTLED_HEADERS)

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
