"""存活 / 就绪检查路由

GET /、GET /api/v1: Liveness 检查，返回纯文本，永远 200。
GET /ready: Readiness 检查，探测 Store 连通性。
"""

import structlog
from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse, PlainTextResponse
from taskdesk.core.exceptions import StoreError

from ..deps import get_store_group

log = structlog.get_logger()

router = APIRouter()

LIVENESS_MESSAGE = "Task Management API is running!"


@router.get("/", response_class=PlainTextResponse)
@router.get("/api/v1", response_class=PlainTextResponse)
async def root():
    """Liveness 检查"""
    return LIVENESS_MESSAGE


@router.get("/ready")
async def ready(store_group=Depends(get_store_group)):
    """Readiness 检查 -- Store 不可用时返回 503"""
    checks = {}
    try:
        await store_group.task_store.ping()
        checks["store"] = "ok"
    except StoreError as e:
        log.warning("readiness_check_failed", error=e.message)
        checks["store"] = "unavailable"

    all_ok = all(v == "ok" for v in checks.values())
    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
