"""版本路由

GET  /api/v1/agents/{namespace}/{name}/versions: 版本列表（最近发布在前）
POST /api/v1/agents/{namespace}/{name}/versions: 发布新版本并设为 latest（201）
GET  /api/v1/agents/{namespace}/{name}/versions/{version}: 拉取版本（计入下载）
GET  /api/v1/agents/{namespace}/{name}/versions/{version}/content: 原始内容
"""

from agenthub.core.models import Principal
from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse, Response

from ..deps import get_principal, get_registry_service, require_principal
from ..schemas import PublishVersionRequest, version_to_dict
from ..services.registry_service import RegistryService

router = APIRouter()

CONTENT_DIGEST_HEADER = "X-Content-Digest"


@router.get("/api/v1/agents/{namespace}/{name}/versions")
async def list_versions(
    namespace: str,
    name: str,
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    versions = await service.list_versions(namespace, name, principal)
    return {"versions": [version_to_dict(v) for v in versions]}


@router.post("/api/v1/agents/{namespace}/{name}/versions", status_code=201)
async def publish_version(
    namespace: str,
    name: str,
    body: PublishVersionRequest,
    principal: Principal = Depends(require_principal),
    service: RegistryService = Depends(get_registry_service),
):
    """发布版本

    - 201: 发布成功，新版本为 latest
    - 400: 版本号为空或 spec 信封不合法
    - 409: 版本号已存在
    - 413: spec 超过大小上限
    """
    version = await service.publish_version(
        namespace,
        name,
        body.version,
        body.spec,
        body.changelog,
        principal,
    )
    return JSONResponse(status_code=201, content=version_to_dict(version))


@router.get("/api/v1/agents/{namespace}/{name}/versions/{version}")
async def get_version(
    namespace: str,
    name: str,
    version: str,
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    """拉取版本，version 可为 "latest" """
    _, pulled, content = await service.pull_version(namespace, name, version, principal)
    return version_to_dict(pulled, content)


@router.get("/api/v1/agents/{namespace}/{name}/versions/{version}/content")
async def get_version_content(
    namespace: str,
    name: str,
    version: str,
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    resolved, content = await service.get_version_content(namespace, name, version, principal)
    return Response(
        content=content,
        media_type="application/x-yaml",
        headers={CONTENT_DIGEST_HEADER: resolved.digest},
    )
