"""框架级错误统一为 {"message": ...} 响应体

- 请求体不是合法 JSON 对象 -> 400
- 未知路由 / 方法不允许等 HTTPException -> 原状态码
- 未捕获异常 -> 500，message 为异常原文

未捕获异常由 ServerErrorMiddleware 处理，位于 CORSMiddleware 之外，需自行补 CORS 头。
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

log = structlog.get_logger()


def describe_request_error(exc: RequestValidationError) -> str:
    """将请求解析错误压缩为一行描述"""
    messages = [err.get("msg", "invalid value") for err in exc.errors()]
    return "Invalid request body: " + "; ".join(messages)


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器"""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_request_error(exc)
        log.info("request_rejected", reason=message)
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.exception("unhandled_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"message": str(exc) or "Internal Server Error"},
            headers={"Access-Control-Allow-Origin": "*"},
        )
