"""枚举定义

包含 Visibility、VersionStatus、SortKey、RuntimeType 枚举。
"""

from enum import StrEnum


class Visibility(StrEnum):
    """Artifact 可见性"""

    PUBLIC = "public"
    # 仅 owner 可见
    PRIVATE = "private"
    # 可通过引用直接访问，但不出现在列表/搜索中
    UNLISTED = "unlisted"


class VersionStatus(StrEnum):
    """Version 状态，发布时固定为 ACTIVE"""

    PENDING = "pending"
    ACTIVE = "active"
    DEPRECATED = "deprecated"


class SortKey(StrEnum):
    """目录排序键，次级排序键固定为 artifact_id 升序"""

    UPDATED = "updated"
    DOWNLOADS = "downloads"
    LIKES = "likes"
    NAME = "name"


class RuntimeType(StrEnum):
    """Agent spec 运行时变体标签"""

    PROMPT = "prompt"
    PYTHON = "python"
    NODEJS = "nodejs"
    DOCKER = "docker"
    REMOTE = "remote"
