"""访问判定 -- 可见性与所有权的纯函数

认证本身由外部协作方完成，这里只对 (visibility, caller_id, owner_id) 做判定。
"""

from .errors import ForbiddenError
from .models import Artifact, Principal, Visibility


def is_visible(visibility: Visibility | str, caller_id: str | None, owner_id: str) -> bool:
    """private 仅 owner 可见；public 与 unlisted 对所有人可见"""
    if Visibility(visibility) == Visibility.PRIVATE:
        return caller_id is not None and caller_id == owner_id
    return True


def is_owner(artifact: Artifact, principal: Principal) -> bool:
    return principal.is_authenticated and principal.principal_id == artifact.owner_id


def require_owner(artifact: Artifact, principal: Principal) -> None:
    """变更操作前调用，非 owner 抛出 ForbiddenError"""
    if not is_owner(artifact, principal):
        raise ForbiddenError(f"permission denied on {artifact.full_name}")
