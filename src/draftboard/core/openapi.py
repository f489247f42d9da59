"""OpenAPI UI plugins for the draftboard API docs."""

from __future__ import annotations

from litestar.openapi.plugins import ScalarRenderPlugin, SwaggerRenderPlugin


def get_openapi_plugins() -> list[ScalarRenderPlugin | SwaggerRenderPlugin]:
    """Get the configured OpenAPI UI plugins.

    Endpoints (relative to OpenAPIConfig.path which is /schema):
        - /schema/ - Scalar UI (default)
        - /schema/swagger - Swagger UI
        - /schema/openapi.json - OpenAPI schema
    """
    return [
        ScalarRenderPlugin(path="/"),
        SwaggerRenderPlugin(path="/swagger"),
    ]
