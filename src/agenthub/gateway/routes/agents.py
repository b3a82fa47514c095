"""Agent 路由

GET    /api/v1/agents: 目录列表（过滤/排序/分页）
POST   /api/v1/agents: 创建 agent（201）
GET    /api/v1/agents/{namespace}/{name}: 详情 + latest 版本
PATCH  /api/v1/agents/{namespace}/{name}: 部分更新元数据（owner）
DELETE /api/v1/agents/{namespace}/{name}: 删除 agent 及全部版本（owner）
POST   /api/v1/agents/{namespace}/{name}/like: 点赞
DELETE /api/v1/agents/{namespace}/{name}/like: 取消点赞
"""

from agenthub.core.models import ArtifactFilter, ArtifactPatch, Principal, SortKey
from fastapi import APIRouter, Depends, Query
from starlette.responses import JSONResponse

from ..deps import get_principal, get_registry_service, require_principal
from ..errors import UnauthenticatedError
from ..schemas import CreateAgentRequest, artifact_to_dict, page_to_dict, version_to_dict
from ..services.registry_service import RegistryService

router = APIRouter()


@router.get("/api/v1/agents")
async def list_agents(
    page: int = Query(default=1, description="页码，从 1 开始"),
    page_size: int | None = Query(default=None, description="每页数量"),
    category: str | None = Query(default=None, description="分类"),
    q: str | None = Query(default=None, description="名称/描述关键词"),
    owner: str | None = Query(default=None, description="命名空间"),
    sort: SortKey = Query(default=SortKey.UPDATED, description="排序键"),
    mine: bool = Query(default=False, description="仅列出自己的 agent"),
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    """目录列表，默认只包含 public agent"""
    if mine and not principal.is_authenticated:
        raise UnauthenticatedError()

    result = await service.list_agents(
        ArtifactFilter(
            category=category,
            owner=owner,
            search=q,
            mine=mine,
            caller_id=principal.principal_id,
        ),
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return page_to_dict(result)


@router.post("/api/v1/agents", status_code=201)
async def create_agent(
    body: CreateAgentRequest,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    artifact = await service.create_agent(
        principal,
        body.name,
        body.to_metadata(),
        namespace=body.namespace,
    )
    return JSONResponse(status_code=201, content=artifact_to_dict(artifact))


@router.get("/api/v1/agents/{namespace}/{name}")
async def get_agent(
    namespace: str,
    name: str,
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    """agent 详情；尚未发布版本时 latest_version 为 null"""
    artifact, latest = await service.get_agent(namespace, name, principal)
    return {
        "agent": artifact_to_dict(artifact),
        "latest_version": version_to_dict(latest) if latest else None,
    }


@router.patch("/api/v1/agents/{namespace}/{name}")
async def update_agent(
    namespace: str,
    name: str,
    patch: ArtifactPatch,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    artifact = await service.update_agent(namespace, name, patch, principal)
    return artifact_to_dict(artifact)


@router.delete("/api/v1/agents/{namespace}/{name}")
async def delete_agent(
    namespace: str,
    name: str,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    deleted_versions = await service.delete_agent(namespace, name, principal)
    return {"message": "agent deleted", "deleted_versions": deleted_versions}


@router.post("/api/v1/agents/{namespace}/{name}/like")
async def like_agent(
    namespace: str,
    name: str,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    likes = await service.like(namespace, name, principal)
    return {"likes": likes}


@router.delete("/api/v1/agents/{namespace}/{name}/like")
async def unlike_agent(
    namespace: str,
    name: str,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    likes = await service.unlike(namespace, name, principal)
    return {"likes": likes}
