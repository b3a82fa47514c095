"""Principal -- 由认证协作方提供的调用方身份

核心层从不校验凭证，只消费 "是否已认证" 与 "是否为 owner" 两个事实。
"""

from pydantic import BaseModel, Field


class Principal(BaseModel):
    """调用方身份"""

    principal_id: str | None = Field(default=None, description="principal ID，匿名时为 None")
    name: str | None = Field(default=None, description="用户名，同时是其默认命名空间")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.principal_id)


ANONYMOUS = Principal()
