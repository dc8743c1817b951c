"""Storage abstraction for wiki pages."""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from flatwiki.core.models import Page

PAGE_SUFFIX = ".txt"


class PageNotFoundError(LookupError):
    """Raised when a page cannot be loaded."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"page {title!r} not found")


class PageStore(ABC):
    """Abstract base class for page storage."""

    @abstractmethod
    async def load(self, title: str) -> Page:
        """Load a page by title. Raises PageNotFoundError if it can't be read."""
        ...

    @abstractmethod
    async def save(self, page: Page) -> None:
        """Save a page, creating or overwriting it. Raises OSError on failure."""
        ...


class FileStorage(PageStore):
    """File-based storage implementation.

    Each page is stored as raw bytes in ``<base_path>/<title>.txt``.
    Titles are used verbatim; callers must only pass validated titles.
    """

    def __init__(self, base_path: Path):
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _title_to_filename(self, title: str) -> str:
        """Convert page title to filename."""
        return title + PAGE_SUFFIX

    def _get_path(self, title: str) -> Path:
        """Get full path for a page."""
        return self.base_path / self._title_to_filename(title)

    async def load(self, title: str) -> Page:
        """Load a page."""
        try:
            body = self._get_path(title).read_bytes()
        except OSError as exc:
            raise PageNotFoundError(title) from exc
        return Page(title=title, body=body)

    async def save(self, page: Page) -> None:
        """Save a page.

        The body goes to a temporary file (mode 0600) in the same directory and
        is then renamed over the target, so readers see either the old or
        the new content.
        """
        path = self._get_path(page.title)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.base_path, prefix=f".{page.title}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(page.body)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
