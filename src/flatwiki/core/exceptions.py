"""Exceptions raised by the page store and the template renderer."""


class WikiError(Exception):
    """Base class for FlatWiki errors."""


class PageLoadError(WikiError):
    """A page could not be read.

    Missing files and other read failures are reported the same way;
    the underlying OSError is chained as ``__cause__``.
    """

    def __init__(self, title: str, reason: str):
        self.title = title
        super().__init__(f"Page '{title}' could not be loaded: {reason}")


class PageSaveError(WikiError):
    def __init__(self, title: str, reason: str):
        self.title = title
        super().__init__(reason)


class TemplateLoadError(WikiError):
    """A template was missing or failed to compile at startup."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Template '{name}' could not be loaded: {reason}")


class RenderError(WikiError):
    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(reason)
