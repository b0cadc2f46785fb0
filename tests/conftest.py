# File: tests/conftest.py
"""Shared fixtures: an in-memory stand-in for the Playwright objects the crawler uses."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError


@dataclass
class FakeResponse:
    status: int


@dataclass
class Route:
    """How the fake site answers one URL."""

    html: str = "<html><body></body></html>"
    status: int = 200
    redirect_to: Optional[str] = None
    error: Optional[Exception] = None
    delay: float = 0.0


class FakePage:
    def __init__(self, context: "FakeContext") -> None:
        self._context = context
        self.url = "about:blank"
        self._html = ""
        self.closed = False

    async def goto(self, url: str, wait_until: str = "load", timeout: float = 30000) -> FakeResponse:
        self._context.requests.append(url)
        self._context.goto_options.append({"wait_until": wait_until, "timeout": timeout})
        route = self._context.routes.get(url)
        if route is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout:.0f}ms exceeded.\nCall log:\n  - navigating to \"{url}\"")
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.error is not None:
            raise route.error
        final_url = url
        if route.redirect_to is not None:
            final_url = route.redirect_to
            route = self._context.routes[final_url]
        self.url = final_url
        self._html = route.html
        return FakeResponse(route.status)

    async def content(self) -> str:
        if self._context.content_error is not None:
            raise self._context.content_error
        return self._html

    async def evaluate(self, script: str) -> Any:
        if "innerText" in script:
            return self._context.body_text
        return {"domContentLoadedMs": 12, "loadEventMs": 40}

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, routes: Dict[str, Union[str, Route]]) -> None:
        self.routes: Dict[str, Route] = {
            url: route if isinstance(route, Route) else Route(html=route) for url, route in routes.items()
        }
        self.requests: List[str] = []
        self.goto_options: List[Dict[str, Any]] = []
        self.pages: List[FakePage] = []
        self.cookie_jar: Dict[str, List[Dict[str, Any]]] = {}
        self.content_error: Optional[Exception] = None
        self.body_text: Optional[str] = None

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def cookies(self, urls: Any = None) -> List[Dict[str, Any]]:
        return list(self.cookie_jar.get(urls, []))


@dataclass
class FakeSession:
    """Async context manager with the same contract as BrowserSession."""

    context: FakeContext
    entered: int = 0
    exited: int = 0
    fail_on_enter: Optional[Exception] = None

    async def __aenter__(self) -> FakeContext:
        if self.fail_on_enter is not None:
            raise self.fail_on_enter
        self.entered += 1
        return self.context

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.exited += 1


def make_session(routes: Dict[str, Union[str, Route]]) -> FakeSession:
    return FakeSession(FakeContext(routes))

