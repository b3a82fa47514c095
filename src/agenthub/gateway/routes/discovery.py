"""发现类路由

GET /api/v1/resolve?ref=: 引用解析 ns/name@version
GET /api/v1/search?q=: 关键词搜索
GET /api/v1/categories: 分类及 public agent 计数
GET /api/v1/trending: 下载量排行
GET /api/v1/featured: 点赞数排行
"""

from agenthub.core.errors import InvalidArgumentError
from agenthub.core.models import ArtifactFilter, Principal, SortKey
from fastapi import APIRouter, Depends, Query

from ..deps import get_principal, get_registry_service
from ..schemas import artifact_to_dict, page_to_dict, version_to_dict
from ..services.registry_service import RegistryService

router = APIRouter()

# 排行榜固定条数
LEADERBOARD_SIZE = 10

CATEGORY_LABELS: dict[str, str] = {
    "assistant": "通用助手",
    "coding": "编程开发",
    "writing": "写作创作",
    "analysis": "数据分析",
    "creative": "创意设计",
    "education": "教育学习",
    "business": "商业办公",
    "research": "研究探索",
    "tooling": "工具效率",
    "other": "其他",
}


@router.get("/api/v1/resolve")
async def resolve(
    ref: str = Query(description="引用，如 alice/bot@1.0.0"),
    principal: Principal = Depends(get_principal),
    service: RegistryService = Depends(get_registry_service),
):
    """解析引用（不计下载）"""
    artifact, version = await service.resolve(ref, principal)
    return {
        "reference": f"{artifact.full_name}@{version.version}",
        "agent": artifact_to_dict(artifact),
        "version": version_to_dict(version),
    }


@router.get("/api/v1/search")
async def search(
    q: str = Query(default="", description="关键词"),
    page: int = Query(default=1),
    page_size: int | None = Query(default=None),
    category: str | None = Query(default=None),
    sort: SortKey = Query(default=SortKey.UPDATED),
    service: RegistryService = Depends(get_registry_service),
):
    query = q.strip()
    if not query:
        raise InvalidArgumentError("query is required")

    result = await service.list_agents(
        ArtifactFilter(search=query, category=category),
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return {**page_to_dict(result), "query": query}


@router.get("/api/v1/categories")
async def list_categories(
    service: RegistryService = Depends(get_registry_service),
):
    counts = await service.count_categories()
    return {
        "categories": [
            {"id": category, "name": CATEGORY_LABELS.get(category, category), "count": count}
            for category, count in counts.items()
        ]
    }


@router.get("/api/v1/trending")
async def trending(
    service: RegistryService = Depends(get_registry_service),
):
    result = await service.list_agents(
        ArtifactFilter(), sort=SortKey.DOWNLOADS, page_size=LEADERBOARD_SIZE
    )
    return {"agents": [artifact_to_dict(a) for a in result.items]}


@router.get("/api/v1/featured")
async def featured(
    service: RegistryService = Depends(get_registry_service),
):
    result = await service.list_agents(
        ArtifactFilter(), sort=SortKey.LIKES, page_size=LEADERBOARD_SIZE
    )
    return {"agents": [artifact_to_dict(a) for a in result.items]}
