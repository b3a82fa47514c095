"""Artifact Domain Model

标识为 (namespace, name)，大小写敏感，创建后不可变。
downloads/likes 计数只能通过原子自增操作修改。
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .enums import Visibility


def _dedupe_tags(tags: list[str]) -> list[str]:
    """tags 语义为集合：去重并保留首次出现顺序"""
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class ArtifactMetadata(BaseModel):
    """创建 Artifact 时提供的元数据"""

    description: str = Field(default="", description="描述")
    category: str = Field(default="other", description="分类（开放字符串）")
    tags: list[str] = Field(default_factory=list, description="标签集合")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="可见性")
    license: str = Field(default="", description="许可证")
    homepage: str = Field(default="", description="主页 URL")
    repository: str = Field(default="", description="代码仓库 URL")

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return _dedupe_tags(value)


class ArtifactPatch(BaseModel):
    """部分更新：未设置的字段保持不变

    标识字段 (namespace, name) 不可修改，因此不出现在 patch 中。
    """

    description: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    visibility: Visibility | None = None
    license: str | None = None
    homepage: str | None = None
    repository: str | None = None

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else _dedupe_tags(value)

    def changes(self) -> dict:
        """返回显式设置且非 None 的字段"""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class Artifact(BaseModel):
    """Artifact 数据模型"""

    artifact_id: str = Field(description="唯一标识，ULID 格式")
    namespace: str = Field(description="命名空间（用户名或组织名）")
    name: str = Field(description="名称")
    description: str = Field(default="", description="描述")
    category: str = Field(default="other", description="分类")
    tags: list[str] = Field(default_factory=list, description="标签集合")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="可见性")
    license: str = Field(default="", description="许可证")
    homepage: str = Field(default="", description="主页 URL")
    repository: str = Field(default="", description="代码仓库 URL")
    downloads: int = Field(default=0, ge=0, description="下载计数")
    likes: int = Field(default=0, ge=0, description="点赞计数")
    owner_id: str = Field(description="owner principal ID")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @property
    def full_name(self) -> str:
        return f"{self.namespace}/{self.name}"
