"""Unit tests for request path validation."""

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from flatwiki.core.router import match_path, page_title


def make_request(path: str) -> Request:
    return Request({"type": "http", "method": "GET", "path": path, "headers": []})


class TestMatchPath:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/view/HomePage", ("view", "HomePage")),
            ("/edit/alice", ("edit", "alice")),
            ("/save/test", ("save", "test")),
            ("/view/Page2", ("view", "Page2")),
            ("/view/0", ("view", "0")),
        ],
    )
    def test_valid_paths(self, path, expected):
        assert match_path(path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/view",
            "/view/",
            "/view/foo/bar",
            "/delete/foo",
            "/view/foo!",
            "/view/foo.txt",
            "/view/my page",
            "/view/café",
            "/view/Ａ",
            "/view/../etc",
            "/save/..",
            "/view/foo\n",
            "/view/foo/",
            "view/foo",
            "//view/foo",
            "/VIEW/foo",
        ],
    )
    def test_invalid_paths(self, path):
        assert match_path(path) is None


class TestPageTitleDependency:
    def test_returns_title(self):
        assert page_title(make_request("/edit/Notes")) == "Notes"

    def test_rejects_with_404(self):
        with pytest.raises(HTTPException) as excinfo:
            page_title(make_request("/save/a-b"))
        assert excinfo.value.status_code == 404

    def test_rejects_trailing_newline(self):
        with pytest.raises(HTTPException):
            page_title(make_request("/view/foo\n"))
