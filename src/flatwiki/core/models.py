"""Data models for FlatWiki."""

from pydantic import BaseModel, ConfigDict, Field

# Titles double as filename stems, so only alphanumerics are allowed.
TITLE_PATTERN = r"^[a-zA-Z0-9]+$"


class Page(BaseModel):
    """Represents a wiki page: a title and its raw body bytes."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(pattern=TITLE_PATTERN)
    body: bytes = b""

    @property
    def text(self) -> str:
        """Return the body decoded for display."""
        return self.body.decode("utf-8", errors="replace")
