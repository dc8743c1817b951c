"""Request path validation and title extraction.

Every page route shares the ``page_title`` dependency, so the title is
checked against the full path pattern before any handler body runs. The
title is used directly as a file name, so nothing outside ``[A-Za-z0-9]+``
may get through.
"""

import re
from typing import Annotated

from fastapi import Depends, HTTPException, Request

VALID_PATH = re.compile(r"/(edit|save|view)/([a-zA-Z0-9]+)")


def match_path(path: str) -> tuple[str, str] | None:
    """Split a request path into ``(action, title)``.

    Returns None unless the whole path is one of the three page routes
    with an ASCII alphanumeric title.
    """
    match = VALID_PATH.fullmatch(path)
    if match is None:
        return None
    return match.group(1), match.group(2)


def page_title(request: Request) -> str:
    """FastAPI dependency returning the validated page title."""
    matched = match_path(request.scope["path"])
    if matched is None:
        raise HTTPException(status_code=404)
    return matched[1]


PageTitle = Annotated[str, Depends(page_title)]
