"""CLI 入口模块 -- python -m agenthub.core <command>

支持的命令：
  init-db           初始化数据库（幂等）
  check-invariants  检查 latest 指针不变量，存在违例时退出码为 1
"""

import asyncio
import sys

from .config import get_blobs_dir, get_db_path, load_registry_config

_USAGE = """用法: python -m agenthub.core <command>
命令:
  init-db           初始化数据库（幂等）
  check-invariants  检查 latest 指针不变量"""


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口，返回退出码"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(_USAGE)
        return 1

    command = args[0]

    if command == "init-db":
        asyncio.run(init_database())
        return 0
    if command == "check-invariants":
        violations = asyncio.run(check_invariants())
        return 1 if violations else 0

    print(f"未知命令: {command}")
    print("可用命令: init-db, check-invariants")
    return 1


async def init_database() -> None:
    """创建数据库文件、表与索引"""
    from .store import create_store_group

    db_path = get_db_path()
    blobs_dir = get_blobs_dir()

    print(f"数据库路径: {db_path}")
    print(f"Blobs 目录: {blobs_dir}")

    store_group = await create_store_group(db_path, blobs_dir, load_registry_config())
    await store_group.close()
    print("初始化完成")


async def check_invariants() -> int:
    """扫描并打印 latest 指针违例，返回违例数"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path, get_blobs_dir(), load_registry_config())
    try:
        violations = await store_group.ledger.check_invariants()
    finally:
        await store_group.close()

    for violation in violations:
        print(f"  违例: {violation.describe()}")
    print(f"检查完成，发现 {len(violations)} 处违例")
    return len(violations)


if __name__ == "__main__":
    sys.exit(main())
