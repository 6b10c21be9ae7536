"""Request handlers for the view, edit and save actions."""

import logging
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from starlette.datastructures import UploadFile

from flatwiki.core.exceptions import PageLoadError, PageSaveError
from flatwiki.core.models import Page
from flatwiki.core.renderer import TemplateRenderer
from flatwiki.core.storage import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WikiContext:
    """Startup-built dependencies shared read-only by all requests."""

    store: Storage
    renderer: TemplateRenderer


def get_wiki(request: Request) -> WikiContext:
    return request.app.state.wiki


async def view_handler(request: Request, title: str) -> Response:
    """View a wiki page."""
    wiki = get_wiki(request)
    try:
        page = await wiki.store.load(title)
    except PageLoadError as exc:
        # Page doesn't exist - redirect to edit to create it
        logger.debug("%s, redirecting to edit", exc)
        return RedirectResponse(url=f"/edit/{title}", status_code=302)
    return wiki.renderer.render(request, "view", page)


async def edit_handler(request: Request, title: str) -> Response:
    """Edit page form; a page that can't be loaded starts out blank."""
    wiki = get_wiki(request)
    try:
        page = await wiki.store.load(title)
    except PageLoadError as exc:
        logger.debug("%s, starting a new page", exc)
        page = Page(title=title)
    return wiki.renderer.render(request, "edit", page)


async def _read_body(request: Request) -> bytes:
    """Return the submitted ``body`` field.

    Form data wins over a ``body`` query parameter; neither means empty.
    """
    form = await request.form()
    # The first value wins when the field is repeated.
    values = form.getlist("body") or request.query_params.getlist("body")
    value = values[0] if values else ""
    if isinstance(value, UploadFile):
        return await value.read()
    return value.encode("utf-8")


async def save_handler(request: Request, title: str) -> Response:
    """Save page content, then redirect to its view."""
    wiki = get_wiki(request)
    page = Page(title=title, body=await _read_body(request))
    try:
        await wiki.store.save(page)
    except PageSaveError as exc:
        logger.exception("Failed to save page %s", title)
        return PlainTextResponse(str(exc), status_code=500)
    return RedirectResponse(url=f"/view/{title}", status_code=302)


HANDLERS = {
    "edit": edit_handler,
    "save": save_handler,
    "view": view_handler,
}
