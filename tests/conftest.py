"""
pytest 配置与共享 fixture。

PanRoutes 按请求路径返回预设响应，并记录收到的请求，
client fixture 用它构造一个走 httpx.MockTransport 的 PCSClient。
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import httpx
import pytest

from pcsshare import PCSClient

from tests.config import PCS_BDSTOKEN, PCS_BDUSS, PCS_STOKEN


class PanRoutes:
    """路径 -> 响应；未注册的路径返回 404。"""

    def __init__(self) -> None:
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        """每次请求都新建 httpx.Response(status_code, **kwargs)。"""
        self.routes[path] = lambda request: httpx.Response(status_code, **kwargs)

    def add_handler(self, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[path] = handler

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)


@pytest.fixture
def routes() -> PanRoutes:
    return PanRoutes()


@pytest.fixture
def client(routes: PanRoutes) -> Iterator[PCSClient]:
    """带登录 cookie 与 bdstoken 的客户端，所有请求由 routes 处理。"""
    c = PCSClient(
        bduss=PCS_BDUSS,
        stoken=PCS_STOKEN,
        bdstoken=PCS_BDSTOKEN,
        transport=httpx.MockTransport(routes),
    )
    yield c
    c.close()
