"""数据库行与领域模型之间的转换"""

import json
from datetime import UTC, datetime

import aiosqlite

from ..models import Artifact, Version, VersionStatus, Visibility


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_ts(ts: datetime) -> str:
    """固定微秒精度，保证字典序即时间序"""
    return ts.astimezone(UTC).isoformat(timespec="microseconds")


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


def row_to_artifact(row: aiosqlite.Row) -> Artifact:
    """将 artifacts 表行转换为 Artifact 模型"""
    return Artifact(
        artifact_id=row["artifact_id"],
        namespace=row["namespace"],
        name=row["name"],
        description=row["description"],
        category=row["category"],
        tags=json.loads(row["tags"]) if row["tags"] else [],
        visibility=Visibility(row["visibility"]),
        license=row["license"],
        homepage=row["homepage"],
        repository=row["repository"],
        downloads=row["downloads"],
        likes=row["likes"],
        owner_id=row["owner_id"],
        created_at=parse_ts(row["created_at"]),
        updated_at=parse_ts(row["updated_at"]),
    )


def row_to_version(row: aiosqlite.Row) -> Version:
    """将 versions 表行转换为 Version 模型"""
    payload = row["payload"]
    return Version(
        version_id=row["version_id"],
        artifact_id=row["artifact_id"],
        version=row["version"],
        digest=row["digest"],
        size=row["size"],
        payload=bytes(payload) if payload is not None else None,
        changelog=row["changelog"],
        is_latest=bool(row["is_latest"]),
        status=VersionStatus(row["status"]),
        published_at=parse_ts(row["published_at"]),
        published_by=row["published_by"],
        downloads=row["downloads"],
    )
