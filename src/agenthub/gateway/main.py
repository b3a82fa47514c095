"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 异常映射 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from agenthub.core.config import get_blobs_dir, get_db_path, load_registry_config
from agenthub.core.store import create_store_group
from fastapi import FastAPI

from .errors import register_exception_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import agents, discovery, health, versions

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store，关闭时清理连接"""
    config = load_registry_config()
    db_path = get_db_path()
    blobs_dir = get_blobs_dir()
    app.state.store_group = await create_store_group(db_path, blobs_dir, config)
    log.info(
        "registry_started",
        db_path=db_path,
        blobs_dir=str(blobs_dir),
        max_payload_bytes=config.max_payload_bytes,
        validate_spec=config.validate_spec,
    )

    yield

    if getattr(app.state, "store_group", None):
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="AgentHub Registry",
        version="0.1.0",
        description="Agent 制品注册中心 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging，Logging 在外层）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire()

    register_exception_handlers(app)

    app.include_router(agents.router, tags=["agents"])
    app.include_router(versions.router, tags=["versions"])
    app.include_router(discovery.router, tags=["discovery"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
