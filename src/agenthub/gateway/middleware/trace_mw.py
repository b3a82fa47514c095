"""TraceMiddleware -- 为 agent 相关请求绑定 artifact_ref

从 /api/v1/agents/{namespace}/{name}[/...] 路径中提取 "namespace/name"，
贯穿该请求内 store 与 service 的日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_AGENTS_SEGMENT = "agents"


def extract_artifact_ref(path: str) -> str | None:
    """提取路径中的 namespace/name，不匹配时返回 None"""
    parts = [part for part in path.split("/") if part]
    try:
        idx = parts.index(_AGENTS_SEGMENT)
    except ValueError:
        return None
    if len(parts) < idx + 3:
        return None
    return f"{parts[idx + 1]}/{parts[idx + 2]}"


class TraceMiddleware(BaseHTTPMiddleware):
    """agent 级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        artifact_ref = extract_artifact_ref(request.url.path)
        if artifact_ref:
            structlog.contextvars.bind_contextvars(artifact_ref=artifact_ref)

        return await call_next(request)
