"""引用解析 -- [namespace "/"] name ["@" selector]

引用语法是持久化的外部契约：
- 省略 namespace 时使用 DEFAULT_NAMESPACE
- 省略 selector 时使用字面量 "latest"
- 仅去除首尾空白，不做大小写折叠或其他默认化
"""

from pydantic import BaseModel, Field

from .config import DEFAULT_NAMESPACE, LATEST_SELECTOR
from .errors import InvalidArgumentError


class Reference(BaseModel):
    """解析后的引用"""

    namespace: str = Field(description="命名空间")
    name: str = Field(description="名称")
    selector: str = Field(default=LATEST_SELECTOR, description="版本选择器")

    @property
    def is_latest(self) -> bool:
        return self.selector == LATEST_SELECTOR

    @property
    def full_name(self) -> str:
        return f"{self.namespace}/{self.name}"

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}@{self.selector}"


def parse_reference(ref: str, default_namespace: str = DEFAULT_NAMESPACE) -> Reference:
    """解析引用字符串

    namespace/name 不含 "@"，selector 按第一个 "@" 切分，其后内容原样作为 selector。

    Raises:
        InvalidArgumentError: 空引用、空段、或包含多个 "/"
    """
    raw = ref.strip()
    if not raw:
        raise InvalidArgumentError("reference must not be empty")

    path, at, selector = raw.partition("@")
    if not at:
        path, selector = raw, LATEST_SELECTOR
    elif not selector:
        raise InvalidArgumentError(f"empty version selector in reference {ref!r}")

    segments = path.split("/")
    if len(segments) == 1:
        namespace, name = default_namespace, segments[0]
    elif len(segments) == 2:
        namespace, name = segments
    else:
        raise InvalidArgumentError(f"reference {ref!r} has more than one '/'")

    if not namespace:
        raise InvalidArgumentError(f"empty namespace in reference {ref!r}")
    if not name:
        raise InvalidArgumentError(f"empty name in reference {ref!r}")

    return Reference(namespace=namespace, name=name, selector=selector)


def validate_identity_segment(value: str, field: str) -> None:
    """校验可被引用语法寻址的 namespace/name

    Raises:
        InvalidArgumentError: 空值，或包含 "/"、"@"、空白字符
    """
    if not value:
        raise InvalidArgumentError(f"{field} must not be empty")
    if "/" in value or "@" in value or any(ch.isspace() for ch in value):
        raise InvalidArgumentError(
            f"{field} {value!r} must not contain '/', '@' or whitespace"
        )
