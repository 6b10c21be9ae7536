"""FlatWiki FastAPI application."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response

from flatwiki.config import Settings, settings as default_settings
from flatwiki.core.exceptions import TemplateLoadError
from flatwiki.core.renderer import TemplateRenderer
from flatwiki.core.router import Router
from flatwiki.core.storage import FileStorage
from flatwiki.handlers import HANDLERS, WikiContext

logger = logging.getLogger(__name__)

# Every method reaches the router; the action, not the verb, picks the handler.
METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    This is the startup phase: templates are compiled and the routing
    table is fixed here. Raises TemplateLoadError when a template is
    missing or broken.
    """
    settings = settings or default_settings

    renderer = TemplateRenderer.load(settings.templates_dir, app_title=settings.app_title)
    store = FileStorage(settings.data_dir)
    router = Router(HANDLERS)
    logger.info(
        "Serving pages from %s (actions: %s)",
        settings.data_dir.resolve(),
        ", ".join(router.actions),
    )

    app = FastAPI(
        title=settings.app_title,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.wiki = WikiContext(store=store, renderer=renderer)
    app.state.router = router

    @app.api_route("/{path:path}", methods=METHODS, include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        return await router.dispatch(request)

    return app


def run() -> None:
    """Console entry point: build the app and serve it until stopped."""
    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = create_app(default_settings)
    except TemplateLoadError:
        logger.exception("Startup failed")
        sys.exit(1)

    # uvicorn logs bind errors itself and exits with its own status code.
    try:
        uvicorn.run(app, host=default_settings.host, port=default_settings.port)
    except SystemExit as exc:
        if exc.code in (None, 0):
            raise
        logger.error(
            "Could not serve on %s:%d (uvicorn exit status %s)",
            default_settings.host,
            default_settings.port,
            exc.code,
        )
        sys.exit(1)


if __name__ == "__main__":
    run()
