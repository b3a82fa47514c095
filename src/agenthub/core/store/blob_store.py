"""BlobStore 文件系统实现 -- 以 digest 寻址的内容存储

路径布局: <blobs_dir>/sha256/<hex[:2]>/<hex>
相同内容只写一次（天然去重）；写入先落临时文件再原子 rename，
并发写同一 digest 时读方不会看到半写文件。
"""

import os
import tempfile
from pathlib import Path

import structlog

from ..digest import digest_hex, verify_digest

log = structlog.get_logger()


class FilesystemBlobStore:
    """BlobStore 的本地文件系统实现"""

    def __init__(self, blobs_dir: Path) -> None:
        self._blobs_dir = blobs_dir

    @property
    def blobs_dir(self) -> Path:
        return self._blobs_dir

    def _get_blob_path(self, digest: str) -> Path:
        """获取 blob 文件存储路径"""
        hex_part = digest_hex(digest)
        algorithm = digest.partition(":")[0]
        return self._blobs_dir / algorithm / hex_part[:2] / hex_part

    async def exists(self, digest: str) -> bool:
        return self._get_blob_path(digest).is_file()

    async def put(self, digest: str, content: bytes) -> bool:
        """写入 blob

        Returns:
            True 表示新写入，False 表示已存在（跳过写入）

        Raises:
            IntegrityError: content 与 digest 不一致
        """
        verify_digest(content, digest)
        path = self._get_blob_path(digest)
        if path.is_file():
            return False

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        log.debug("blob_written", digest=digest, size=len(content))
        return True

    async def get(self, digest: str) -> bytes | None:
        """读取 blob，不存在时返回 None"""
        path = self._get_blob_path(digest)
        if not path.is_file():
            return None
        return path.read_bytes()
