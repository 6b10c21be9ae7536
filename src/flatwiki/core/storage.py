"""Storage abstraction for wiki pages."""

import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path

from flatwiki.core.exceptions import PageLoadError, PageSaveError
from flatwiki.core.models import TITLE_PATTERN, Page

logger = logging.getLogger(__name__)


class Storage(ABC):
    """Abstract base class for page storage."""

    @abstractmethod
    async def load(self, title: str) -> Page:
        """Load a page by title. Raises PageLoadError on any failure."""
        ...

    @abstractmethod
    async def save(self, page: Page) -> None:
        """Save a page, replacing any previous content.

        Raises PageSaveError on failure.
        """
        ...


class FileStorage(Storage):
    """File-based storage implementation.

    Each page is one file holding exactly its body bytes.
    File naming: Title.txt, directly inside base_path.
    """

    SUFFIX = ".txt"
    FILE_MODE = 0o600

    def __init__(self, base_path: Path):
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _title_to_filename(self, title: str) -> str:
        """Convert page title to filename."""
        return title + self.SUFFIX

    def _get_path(self, title: str) -> Path:
        """Get full path for a page."""
        return self.base_path / self._title_to_filename(title)

    async def load(self, title: str) -> Page:
        """Load a page."""
        if re.fullmatch(TITLE_PATTERN, title) is None:
            raise PageLoadError(title, "invalid title")
        path = self._get_path(title)
        try:
            body = path.read_bytes()
        except OSError as exc:
            raise PageLoadError(title, str(exc)) from exc
        return Page(title=title, body=body)

    async def save(self, page: Page) -> None:
        """Save a page.

        No locking: concurrent saves of one title race and the last
        write to finish wins. The file is truncated before writing, so
        a crash mid-write can leave partial content.
        """
        path = self._get_path(page.title)
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.FILE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(page.body)
        except OSError as exc:
            raise PageSaveError(page.title, str(exc)) from exc
        logger.info("Saved page %s (%d bytes)", page.title, len(page.body))
