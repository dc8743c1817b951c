"""Template loading and page rendering."""

import logging
from pathlib import Path

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from flatwiki.core.models import Page

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("edit", "view")


class TemplateLoadError(RuntimeError):
    """Raised at startup when a required template is missing or broken."""


def http_error(message: str, status_code: int) -> PlainTextResponse:
    """Plain-text error response carrying the raw message."""
    return PlainTextResponse(f"{message}\n", status_code=status_code)


class TemplateRenderer:
    """Renders the wiki's page templates.

    All templates are parsed eagerly in the constructor; after that the
    renderer is only read from, so one instance is shared by all requests.
    """

    def __init__(self, directory: Path, app_title: str = "FlatWiki"):
        self.directory = directory
        self.app_title = app_title
        self.templates = Jinja2Templates(directory=str(directory))
        for name in TEMPLATE_NAMES:
            try:
                self.templates.get_template(f"{name}.html")
            except TemplateError as exc:
                logger.error("Failed to load template %s.html from %s", name, directory)
                raise TemplateLoadError(
                    f"cannot load template {name}.html: {exc}"
                ) from exc

    def render(self, request: Request, name: str, page: Page) -> Response:
        """Render template ``name`` with ``page`` as its context.

        Any error raised while executing the template becomes a 500
        response with the error text as the body.
        """
        try:
            return self.templates.TemplateResponse(
                request,
                f"{name}.html",
                {"page": page, "app_title": self.app_title},
            )
        except Exception as exc:
            logger.exception("Failed to render %s for page %s", name, page.title)
            return http_error(str(exc), 500)
