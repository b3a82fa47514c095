"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与调用方身份

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
调用方身份由上游认证代理写入请求头，此处只读取不校验。
"""

from agenthub.core.models import ANONYMOUS, Principal
from agenthub.core.store import StoreGroup
from fastapi import Depends, Request

from .errors import UnauthenticatedError
from .services.registry_service import RegistryService

PRINCIPAL_ID_HEADER = "X-Principal-Id"
PRINCIPAL_NAME_HEADER = "X-Principal-Name"


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_registry_service(store_group: StoreGroup = Depends(get_store_group)) -> RegistryService:
    return RegistryService(store_group)


def get_principal(request: Request) -> Principal:
    """从请求头读取 principal，缺失时为匿名"""
    principal_id = request.headers.get(PRINCIPAL_ID_HEADER, "").strip()
    if not principal_id:
        return ANONYMOUS
    name = request.headers.get(PRINCIPAL_NAME_HEADER, "").strip() or None
    return Principal(principal_id=principal_id, name=name)


def require_principal(principal: Principal = Depends(get_principal)) -> Principal:
    """变更类接口要求已认证，匿名返回 401"""
    if not principal.is_authenticated:
        raise UnauthenticatedError()
    return principal
