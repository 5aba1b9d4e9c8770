from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from .errors import UnknownContentTypeError
from .model import SiteModel

logger = logging.getLogger(__name__)


def create_app(model: SiteModel) -> FastAPI:
    """Create the preview application serving every resource of ``model``."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.state.site_model = model

    @app.exception_handler(UnknownContentTypeError)
    async def _unknown_content_type(request: Request, exc: UnknownContentTypeError) -> Response:
        logger.error("Error serving %s: %s", request.url.path, exc)
        return PlainTextResponse("internal server error", status_code=500)

    @app.api_route("/{path:path}", methods=["GET", "HEAD"])
    def serve(path: str) -> Response:
        site_response = model.handle("/" + path)
        return Response(
            content=site_response.body,
            status_code=site_response.status,
            headers=site_response.headers,
        )

    return app


def run_server(model: SiteModel, host: str, port: int) -> None:
    uvicorn.run(create_app(model), host=host, port=port, log_level="info")
