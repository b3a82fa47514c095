"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、blob 目录、分页与 payload 限制等可配置项，
以及引用语法中的公共契约常量（默认命名空间、latest 选择器）。
"""

import os
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

# 引用语法公共契约：修改需同时升级契约版本
DEFAULT_NAMESPACE: str = "agenthub"
LATEST_SELECTOR: str = "latest"

# 列表/搜索分面使用的已知分类
KNOWN_CATEGORIES: tuple[str, ...] = (
    "assistant",
    "coding",
    "writing",
    "analysis",
    "creative",
    "education",
    "business",
    "research",
    "tooling",
    "other",
)


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("AGENTHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "AGENTHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "agenthub.db"),
    )


def get_blobs_dir() -> Path:
    """获取 blob 内容存储目录"""
    return Path(
        os.environ.get(
            "AGENTHUB_BLOBS_DIR",
            str(_get_base_dir() / "blobs"),
        )
    )


class RegistryConfig(BaseModel):
    """Registry 运行配置 -- 从环境变量加载

    环境变量:
        AGENTHUB_DEFAULT_PAGE_SIZE: 默认分页大小（默认 20）
        AGENTHUB_MAX_PAGE_SIZE: 分页大小上限（默认 100）
        AGENTHUB_MAX_PAYLOAD_BYTES: 单个版本 payload 上限（默认 10 MiB）
        AGENTHUB_INLINE_THRESHOLD: 小于此值的 payload inline 存储（默认 64 KiB）
        AGENTHUB_VALIDATE_SPEC: 发布时是否校验 agent spec 信封（默认 true）
    """

    default_page_size: int = Field(default=20, ge=1, description="默认分页大小")
    max_page_size: int = Field(default=100, ge=1, description="分页大小上限")
    max_payload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="单个版本 payload 最大字节数",
    )
    inline_threshold: int = Field(
        default=64 * 1024,
        ge=0,
        description="inline 存储阈值（字节），达到阈值的 payload 写入 blob store",
    )
    validate_spec: bool = Field(default=True, description="发布时校验 agent spec 信封")


_INT_SETTINGS: dict[str, str] = {
    "AGENTHUB_DEFAULT_PAGE_SIZE": "default_page_size",
    "AGENTHUB_MAX_PAGE_SIZE": "max_page_size",
    "AGENTHUB_MAX_PAYLOAD_BYTES": "max_payload_bytes",
    "AGENTHUB_INLINE_THRESHOLD": "inline_threshold",
}


def load_registry_config() -> RegistryConfig:
    """从环境变量加载 Registry 配置

    非法整数值记录 warning 并回退默认值，不阻塞启动。

    Returns:
        RegistryConfig 实例
    """
    kwargs: dict = {}

    for env_var, field_name in _INT_SETTINGS.items():
        if val := os.environ.get(env_var):
            try:
                kwargs[field_name] = int(val)
            except ValueError:
                log.warning(
                    "invalid_int_config",
                    env_var=env_var,
                    value=val,
                    fallback=RegistryConfig.model_fields[field_name].default,
                )

    if val := os.environ.get("AGENTHUB_VALIDATE_SPEC"):
        kwargs["validate_spec"] = val.lower() not in ("0", "false", "no")

    return RegistryConfig(**kwargs)
