"""OpenAPI customization utilities.

Enriches the generated schema with tag descriptions and documents the
rate-limit response headers on every guarded operation.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_RATE_LIMIT_HEADERS = {
    "Retry-After": "Seconds until the client's window resets.",
    "X-RateLimit-Limit": "Admissions allowed per window for this route.",
    "X-RateLimit-Remaining": "Admissions left in the current window.",
    "X-RateLimit-Reset": "UNIX epoch seconds at which the window resets.",
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tag metadata and 429 headers."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "External profiles",
                "description": "Rate-limited, cached lookups of public coding profiles.",
            },
            {
                "name": "Health",
                "description": "Liveness check; never rate limited.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                throttled = method_obj.get("responses", {}).get("429")
                if throttled is not None:
                    throttled.setdefault(
                        "headers",
                        {
                            name: {"description": text, "schema": {"type": "integer"}}
                            for name, text in _RATE_LIMIT_HEADERS.items()
                        },
                    )

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
