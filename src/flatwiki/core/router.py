"""Path validation and dispatch for page actions.

Every request path must look like ``/<action>/<title>`` where the
action is registered and the title is purely alphanumeric. The title
becomes a filename, so this whitelist is what keeps requests such as
``/view/../../etc/passwd`` away from the filesystem.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request, str], Awaitable[Response]]

TITLE_CHARS = "[a-zA-Z0-9]+"


class Router:
    """Immutable action table plus the path pattern derived from it."""

    def __init__(self, handlers: Mapping[str, Handler]):
        if not handlers:
            raise ValueError("Router needs at least one handler")
        self._handlers = MappingProxyType(dict(handlers))
        actions = "|".join(re.escape(action) for action in sorted(self._handlers))
        self.pattern = re.compile(rf"/({actions})/({TITLE_CHARS})")

    @property
    def actions(self) -> list[str]:
        return sorted(self._handlers)

    def match(self, path: str) -> tuple[str, str] | None:
        """Return ``(action, title)`` for a valid path, else None.

        The whole path must match; a trailing newline is rejected too.
        """
        m = self.pattern.fullmatch(path)
        if m is None:
            return None
        return m.group(1), m.group(2)

    async def dispatch(self, request: Request) -> Response:
        """Run the handler registered for the request path, or 404."""
        # scope["path"] is already percent-decoded, so encoded separators
        # are matched (and rejected) as the characters they stand for.
        path = request.scope["path"]
        matched = self.match(path)
        if matched is None:
            logger.debug("Rejected path %r", path)
            return not_found()
        action, title = matched
        return await self._handlers[action](request, title)


def not_found() -> Response:
    return PlainTextResponse("404 page not found", status_code=404)
