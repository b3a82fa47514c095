"""Version Domain Model

(artifact_id, version) 唯一；内容发布后不可变，
发布后唯一允许的变更是 is_latest 的翻转（以及下载计数自增）。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import VersionStatus


class Version(BaseModel):
    """Version 数据模型

    payload 仅在 inline 存储时填充；
    大于 inline 阈值的内容存放在 blob store，通过 digest 读取。
    """

    version_id: str = Field(description="唯一标识，ULID 格式")
    artifact_id: str = Field(description="所属 Artifact ID")
    version: str = Field(description="版本字符串（对核心不透明）")
    digest: str = Field(description="payload 的内容指纹 sha256:<hex>")
    size: int = Field(ge=0, description="payload 字节数")
    payload: bytes | None = Field(default=None, description="inline payload", repr=False)
    changelog: str = Field(default="", description="变更说明")
    is_latest: bool = Field(default=False, description="是否为当前 latest 版本")
    status: VersionStatus = Field(default=VersionStatus.ACTIVE, description="版本状态")
    published_at: datetime = Field(description="发布时间")
    published_by: str = Field(description="发布者 principal ID")
    downloads: int = Field(default=0, ge=0, description="版本下载计数")

    @property
    def stored_inline(self) -> bool:
        return self.payload is not None
