"""Registry 异常体系

所有失败均为本地同步失败，传输层按 code 映射为协议状态码。
"""


class RegistryError(Exception):
    """Registry 基础异常"""

    code: str = "REGISTRY_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """错误负载（传输层直接序列化）"""
        return {"code": self.code, "message": self.message}


class InvalidArgumentError(RegistryError):
    """客户端参数错误：非法引用、空版本号、缺失必填字段等"""

    code = "INVALID_ARGUMENT"


class PayloadTooLargeError(InvalidArgumentError):
    """payload 超过配置上限（不会被静默截断）"""

    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, size: int, max_bytes: int) -> None:
        super().__init__(f"payload of {size} bytes exceeds the limit of {max_bytes} bytes")
        self.size = size
        self.max_bytes = max_bytes

    def to_dict(self) -> dict:
        return {**super().to_dict(), "size": self.size, "max_bytes": self.max_bytes}


class NotFoundError(RegistryError):
    """资源不存在

    missing 标明缺失的部分：
    - "artifact": 命名空间/名称不存在或对调用方不可见
    - "version": 指定版本不存在
    - "latest": artifact 没有 latest 版本（零版本）
    """

    code = "NOT_FOUND"

    def __init__(self, message: str, missing: str, reference: str | None = None) -> None:
        super().__init__(message)
        self.missing = missing
        self.reference = reference

    def to_dict(self) -> dict:
        data = {**super().to_dict(), "missing": self.missing}
        if self.reference is not None:
            data["reference"] = self.reference
        return data


class ConflictError(RegistryError):
    """唯一性冲突：重复的 artifact 标识或重复的版本号，从不静默 upsert"""

    code = "CONFLICT"


class ForbiddenError(RegistryError):
    """非 owner 尝试变更操作，在任何写入之前检查"""

    code = "FORBIDDEN"


class IntegrityError(RegistryError):
    """存储内容与记录的 digest 不一致"""

    code = "INTEGRITY_ERROR"

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"content digest mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
