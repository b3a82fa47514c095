"""AgentHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .agent_spec import AgentSpec, SpecMetadata, parse_agent_spec
from .artifact import Artifact, ArtifactMetadata, ArtifactPatch
from .enums import RuntimeType, SortKey, VersionStatus, Visibility
from .principal import ANONYMOUS, Principal
from .query import ArtifactFilter, ArtifactPage
from .version import Version

__all__ = [
    # 枚举
    "Visibility",
    "VersionStatus",
    "SortKey",
    "RuntimeType",
    # Artifact
    "Artifact",
    "ArtifactMetadata",
    "ArtifactPatch",
    # Version
    "Version",
    # 查询
    "ArtifactFilter",
    "ArtifactPage",
    # 调用方
    "Principal",
    "ANONYMOUS",
    # Spec 信封
    "AgentSpec",
    "SpecMetadata",
    "parse_agent_spec",
]
