"""Data models for FlatWiki."""

from pydantic import BaseModel


class Page(BaseModel):
    """A wiki page: a title and its raw body bytes."""

    title: str
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body decoded for display; invalid UTF-8 is replaced."""
        return self.body.decode("utf-8", errors="replace")
