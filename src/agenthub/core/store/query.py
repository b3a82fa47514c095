"""CatalogQuery SQLite 实现 -- 过滤、排序、分页

- 过滤条件之间为 AND；非 mine 查询只包含 public artifact
- 排序键之后固定追加 artifact_id 升序，保证翻页顺序确定
- total 与当前页在同一条语句中计算（窗口函数），两者来自同一快照
"""

import aiosqlite

from ..config import KNOWN_CATEGORIES
from ..errors import InvalidArgumentError
from ..models import ArtifactFilter, ArtifactPage, SortKey, Visibility
from ._codec import row_to_artifact

_ORDER_BY: dict[SortKey, str] = {
    SortKey.UPDATED: "updated_at DESC, artifact_id ASC",
    SortKey.DOWNLOADS: "downloads DESC, artifact_id ASC",
    SortKey.LIKES: "likes DESC, artifact_id ASC",
    SortKey.NAME: "name ASC, artifact_id ASC",
}


def _casefold(value: str | None) -> str | None:
    return None if value is None else value.casefold()


async def register_sql_functions(conn: aiosqlite.Connection) -> None:
    """注册查询依赖的 SQL 函数（连接级，需在每个读连接上调用）"""
    await conn.create_function("casefold", 1, _casefold, deterministic=True)


def _build_where(filter: ArtifactFilter) -> tuple[str, list]:
    clauses: list[str] = []
    params: list = []

    if filter.mine:
        if not filter.caller_id:
            raise InvalidArgumentError("listing own agents requires an authenticated caller")
        clauses.append("owner_id = ?")
        params.append(filter.caller_id)
    else:
        clauses.append("visibility = ?")
        params.append(Visibility.PUBLIC.value)

    if filter.category:
        if filter.category not in KNOWN_CATEGORIES:
            raise InvalidArgumentError(f"unknown category {filter.category!r}")
        clauses.append("category = ?")
        params.append(filter.category)

    if filter.owner:
        clauses.append("namespace = ?")
        params.append(filter.owner)

    search = (filter.search or "").strip()
    if search:
        needle = search.casefold()
        clauses.append("(instr(casefold(name), ?) > 0 OR instr(casefold(description), ?) > 0)")
        params.extend([needle, needle])

    return " AND ".join(clauses), params


class SqliteCatalogQuery:
    """CatalogQuery 的 SQLite 实现（只读，使用共享连接）"""

    def __init__(self, conn: aiosqlite.Connection, max_page_size: int) -> None:
        self._conn = conn
        self._max_page_size = max_page_size

    async def list_artifacts(
        self,
        filter: ArtifactFilter,
        sort: SortKey = SortKey.UPDATED,
        page: int = 1,
        page_size: int = 20,
    ) -> ArtifactPage:
        """列出目录

        Raises:
            InvalidArgumentError: page < 1、page_size 越界或未知分类
        """
        if page < 1:
            raise InvalidArgumentError(f"page must be >= 1, got {page}")
        if not 1 <= page_size <= self._max_page_size:
            raise InvalidArgumentError(
                f"page_size must be between 1 and {self._max_page_size}, got {page_size}"
            )

        where, params = _build_where(filter)
        cursor = await self._conn.execute(
            f"""
            SELECT *, COUNT(*) OVER () AS total_count
            FROM artifacts
            WHERE {where}
            ORDER BY {_ORDER_BY[SortKey(sort)]}
            LIMIT ? OFFSET ?
            """,
            (*params, page_size, (page - 1) * page_size),
        )
        rows = await cursor.fetchall()

        if rows:
            total = rows[0]["total_count"]
        else:
            # 越过末页时窗口函数没有行可用，单独计数
            cursor = await self._conn.execute(
                f"SELECT COUNT(*) FROM artifacts WHERE {where}",
                params,
            )
            total = (await cursor.fetchone())[0]

        return ArtifactPage(
            items=[row_to_artifact(row) for row in rows],
            total=total,
            page=page,
            page_size=page_size,
            sort=SortKey(sort),
        )

    async def count_by_category(self) -> dict[str, int]:
        """已知分类下的 public artifact 数量（无 artifact 的分类计 0）"""
        cursor = await self._conn.execute(
            """
            SELECT category, COUNT(*) FROM artifacts
            WHERE visibility = ?
            GROUP BY category
            """,
            (Visibility.PUBLIC.value,),
        )
        rows = await cursor.fetchall()
        counts = {category: 0 for category in KNOWN_CATEGORIES}
        for category, count in rows:
            if category in counts:
                counts[category] = count
        return counts
