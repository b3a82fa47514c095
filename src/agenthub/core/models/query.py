"""目录查询模型 -- 过滤条件与分页结果"""

from pydantic import BaseModel, Field

from .artifact import Artifact
from .enums import SortKey


class ArtifactFilter(BaseModel):
    """目录过滤条件（各条件之间为 AND 关系）

    mine=True 时列出 caller_id 拥有的全部 artifact（任意可见性），
    否则只包含 public artifact。
    """

    category: str | None = Field(default=None, description="分类精确匹配")
    owner: str | None = Field(default=None, description="命名空间精确匹配")
    search: str | None = Field(
        default=None,
        description="名称或描述的大小写不敏感子串匹配",
    )
    mine: bool = Field(default=False, description="仅列出调用方自己的 artifact")
    caller_id: str | None = Field(default=None, description="调用方 principal ID")


class ArtifactPage(BaseModel):
    """分页结果

    total 为分页前的匹配总数。
    """

    items: list[Artifact] = Field(default_factory=list)
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    sort: SortKey = Field(default=SortKey.UPDATED)

    @property
    def pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size
