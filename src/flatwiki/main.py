"""FlatWiki FastAPI application."""

import logging
from typing import Annotated
from urllib.parse import parse_qsl

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, UploadFile
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from flatwiki.config import Settings, settings
from flatwiki.core.models import Page
from flatwiki.core.renderer import TemplateRenderer, http_error
from flatwiki.core.router import PageTitle
from flatwiki.core.storage import FileStorage, PageNotFoundError, PageStore

logger = logging.getLogger(__name__)


def get_storage(request: Request) -> PageStore:
    return request.app.state.storage


def get_renderer(request: Request) -> TemplateRenderer:
    return request.app.state.renderer


Storage = Annotated[PageStore, Depends(get_storage)]
Renderer = Annotated[TemplateRenderer, Depends(get_renderer)]

router = APIRouter()


@router.get("/view/{title}")
async def view_page(
    request: Request, title: PageTitle, storage: Storage, renderer: Renderer
):
    """View a wiki page."""
    try:
        page = await storage.load(title)
    except PageNotFoundError:
        # Page doesn't exist - redirect to edit to create it
        return RedirectResponse(url=f"/edit/{title}", status_code=302)
    return renderer.render(request, "view", page)


@router.get("/edit/{title}")
async def edit_page(
    request: Request, title: PageTitle, storage: Storage, renderer: Renderer
):
    """Edit page form."""
    try:
        page = await storage.load(title)
    except PageNotFoundError:
        # New page
        page = Page(title=title)
    return renderer.render(request, "edit", page)


async def form_body(request: Request) -> bytes:
    """The raw bytes of the "body" form field, empty when absent.

    URL-encoded payloads are decoded as latin-1 so percent-escapes come
    back byte for byte; the text parser would replace invalid UTF-8.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/x-www-form-urlencoded"):
        payload = (await request.body()).decode("latin-1")
        for key, value in parse_qsl(
            payload, keep_blank_values=True, encoding="latin-1"
        ):
            if key == "body":
                return value.encode("latin-1")
        return b""
    form = await request.form()
    value = form.get("body", "")
    if isinstance(value, UploadFile):
        return await value.read()
    return value.encode("utf-8")


@router.post("/save/{title}")
async def save_page(
    title: PageTitle, storage: Storage, body: Annotated[bytes, Depends(form_body)]
):
    """Save page content."""
    page = Page(title=title, body=body)
    try:
        await storage.save(page)
    except OSError as exc:
        logger.error("Failed to save page %s: %s", title, exc)
        return http_error(str(exc), 500)
    logger.info("Saved page %s", title)
    return RedirectResponse(url=f"/view/{title}", status_code=302)


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Answer unknown paths and unsupported methods with a plain 404."""
    if exc.status_code in (404, 405):
        return http_error("404 page not found", 404)
    return await http_exception_handler(request, exc)


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application.

    Templates are loaded here, so a missing or broken template raises
    TemplateLoadError before anything is served.
    """
    app = FastAPI(
        title=config.app_title,
        debug=config.debug,
        redirect_slashes=False,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.storage = FileStorage(config.data_dir)
    app.state.renderer = TemplateRenderer(config.templates_dir, config.app_title)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.include_router(router)
    logger.info(
        "FlatWiki ready: pages in %s, templates from %s",
        config.data_dir,
        config.templates_dir,
    )
    return app


def run() -> None:
    """Console entry point: serve the wiki with uvicorn."""
    logging.basicConfig(level=settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
