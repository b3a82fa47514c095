"""请求体模型与响应序列化"""

from agenthub.core.models import Artifact, ArtifactMetadata, ArtifactPage, Version, Visibility
from pydantic import BaseModel, Field


class CreateAgentRequest(BaseModel):
    """创建 agent 请求体，namespace 缺省为调用方用户名"""

    name: str = Field(description="名称")
    namespace: str | None = Field(default=None, description="命名空间")
    description: str = ""
    category: str = "other"
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    license: str = ""
    homepage: str = ""
    repository: str = ""

    def to_metadata(self) -> ArtifactMetadata:
        return ArtifactMetadata(**self.model_dump(exclude={"name", "namespace"}))


class PublishVersionRequest(BaseModel):
    """发布版本请求体，spec 为 agentspec.yaml 原文"""

    version: str = Field(description="版本字符串")
    spec: str = Field(description="agent spec 原文")
    changelog: str = ""


def artifact_to_dict(artifact: Artifact) -> dict:
    data = artifact.model_dump(mode="json")
    data["full_name"] = artifact.full_name
    return data


def version_to_dict(version: Version, content: bytes | None = None) -> dict:
    """序列化版本元数据；提供 content 时附带 spec 原文"""
    data = version.model_dump(mode="json", exclude={"payload"})
    if content is not None:
        data["spec"] = content.decode("utf-8", errors="replace")
    return data


def page_to_dict(page: ArtifactPage) -> dict:
    return {
        "agents": [artifact_to_dict(a) for a in page.items],
        "total": page.total,
        "page": page.page,
        "page_size": page.page_size,
        "pages": page.pages,
        "sort": page.sort.value,
    }
