"""错误映射 -- RegistryError.code -> HTTP 状态码

所有错误响应统一为 {"error": {"code": ..., "message": ..., ...}}。
"""

import structlog
from agenthub.core.errors import RegistryError
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

STATUS_BY_CODE: dict[str, int] = {
    "INVALID_ARGUMENT": 400,
    "PAYLOAD_TOO_LARGE": 413,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "INTEGRITY_ERROR": 500,
}


class UnauthenticatedError(Exception):
    """变更类接口缺少认证 principal（由传输层判定，核心层不感知）"""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "authentication required") -> None:
        super().__init__(message)
        self.message = message


def error_response(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": content})


async def handle_registry_error(request: Request, exc: RegistryError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code >= 500:
        log.error("registry_error", code=exc.code, message=exc.message)
    else:
        log.info("request_rejected", code=exc.code, status_code=status_code)
    return error_response(status_code, exc.to_dict())


async def handle_unauthenticated(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    return error_response(401, {"code": exc.code, "message": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistryError, handle_registry_error)
    app.add_exception_handler(UnauthenticatedError, handle_unauthenticated)
