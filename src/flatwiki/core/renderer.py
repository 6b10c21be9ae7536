"""Named, precompiled page templates.

Templates are compiled once by :meth:`TemplateRenderer.load` during
startup and are read-only afterwards, so one renderer is shared by all
requests.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from fastapi import Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import Template, TemplateError

from flatwiki.core.exceptions import RenderError, TemplateLoadError
from flatwiki.core.models import Page

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("edit", "view")


class TemplateRenderer:
    """Renders pages through a fixed set of compiled templates."""

    def __init__(self, templates: Mapping[str, Template], app_title: str = "FlatWiki"):
        self._templates = MappingProxyType(dict(templates))
        self.app_title = app_title

    @classmethod
    def load(
        cls,
        directory: Path,
        app_title: str = "FlatWiki",
        names: Iterable[str] = TEMPLATE_NAMES,
    ) -> "TemplateRenderer":
        """Compile ``<name>.html`` from ``directory`` for every name.

        Raises TemplateLoadError for the first template that is missing
        or does not compile. Callers treat that as fatal.
        """
        jinja = Jinja2Templates(directory=str(directory))
        compiled: dict[str, Template] = {}
        for name in names:
            try:
                compiled[name] = jinja.get_template(f"{name}.html")
            except TemplateError as exc:
                raise TemplateLoadError(name, str(exc)) from exc
        logger.info("Loaded templates from %s: %s", directory, ", ".join(compiled))
        return cls(compiled, app_title=app_title)

    @property
    def names(self) -> list[str]:
        return sorted(self._templates)

    def render_html(self, name: str, page: Page, **context) -> str:
        """Execute a template against a page. Raises RenderError."""
        template = self._templates.get(name)
        if template is None:
            raise RenderError(name, f"no template named '{name}'")
        try:
            return template.render(page=page, app_title=self.app_title, **context)
        except Exception as exc:
            raise RenderError(name, str(exc)) from exc

    def render(self, request: Request, name: str, page: Page) -> Response:
        """Render a template into a response.

        The body is rendered completely before the response is built, so
        a failure yields a clean 500 instead of truncated HTML.
        """
        try:
            html = self.render_html(name, page, request=request)
        except RenderError as exc:
            logger.exception("Failed to render %s for page %s", name, page.title)
            return PlainTextResponse(str(exc), status_code=500)
        return HTMLResponse(html)
