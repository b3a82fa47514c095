"""内容寻址 -- 版本 payload 的 SHA-256 指纹

对原始字节计算哈希，而非对解析后的结构做语义哈希：
文本不同但语义相同的两份 spec 得到不同的 digest。
"""

import hashlib

from .errors import IntegrityError, PayloadTooLargeError

DIGEST_ALGORITHM = "sha256"


def compute_digest(payload: bytes) -> str:
    """计算 payload 的 digest，格式为 "sha256:<hex>" """
    return f"{DIGEST_ALGORITHM}:{hashlib.sha256(payload).hexdigest()}"


def compute_digest_and_size(payload: bytes, max_bytes: int | None = None) -> tuple[str, int]:
    """计算 digest 和内容大小

    Args:
        payload: 原始内容字节
        max_bytes: 大小上限，None 表示不限制

    Returns:
        (digest, size_bytes) 元组

    Raises:
        PayloadTooLargeError: payload 超过 max_bytes
    """
    size = len(payload)
    if max_bytes is not None and size > max_bytes:
        raise PayloadTooLargeError(size, max_bytes)
    return compute_digest(payload), size


def verify_digest(payload: bytes, expected: str) -> None:
    """校验内容与记录的 digest 一致，不一致时抛出 IntegrityError"""
    actual = compute_digest(payload)
    if actual != expected:
        raise IntegrityError(expected, actual)


def digest_hex(digest: str) -> str:
    """去掉算法前缀，返回十六进制部分"""
    algorithm, sep, hex_part = digest.partition(":")
    if not sep or algorithm != DIGEST_ALGORITHM or len(hex_part) != 64:
        raise ValueError(f"unsupported digest: {digest!r}")
    return hex_part
