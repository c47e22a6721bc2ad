"""BodyLimitMiddleware -- 请求体大小限制

声明的 Content-Length 超过上限时直接返回 413，不进入路由处理。
未声明长度的分块请求在读取过程中累计字节数，超限时抛出 413 HTTPException，
由应用的异常处理器渲染为 {"message": ...}。
"""

from typing import Any

import structlog
from fastapi import HTTPException
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

log = structlog.get_logger()

TOO_LARGE_MESSAGE = "request entity too large"


class BodyLimitMiddleware:
    """请求体大小限制中间件（纯 ASGI，需要包装 receive）"""

    def __init__(self, app: ASGIApp, max_body_bytes: int) -> None:
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = _extract_header(scope, b"content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=400,
                    content={"message": "invalid content-length header"},
                )
                await response(scope, receive, send)
                return
            if size > self.max_body_bytes:
                self._log_rejected(size)
                response = JSONResponse(
                    status_code=413,
                    content={"message": TOO_LARGE_MESSAGE},
                )
                await response(scope, receive, send)
                return

        await self.app(scope, self._limited_receive(receive), send)

    def _limited_receive(self, receive: Receive) -> Receive:
        received = 0

        async def wrapped() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    self._log_rejected(received)
                    raise HTTPException(status_code=413, detail=TOO_LARGE_MESSAGE)
            return message

        return wrapped

    def _log_rejected(self, size: int) -> None:
        log.warning(
            "request_body_too_large",
            size=size,
            limit=self.max_body_bytes,
        )


def _extract_header(scope: dict[str, Any], name: bytes) -> str | None:
    """从 ASGI scope 中读取请求头（不区分大小写）"""
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None
