"""역할 기반 권한(capability) 검사 모듈.

Role-based capability module.
Roles form a closed enum; each role maps to a fixed capability set.
ensure_capability() is the single gate used by both the HTTP dependencies
(kaizen.api.deps.require_capability) and the services.

Capability table:
    employee: idea:submit, idea:browse, idea:edit_own, notification:read, leaderboard:read
    reviewer: employee + idea:review, stats:read
    admin:    reviewer + user:manage
"""

import enum

from kaizen.models.user import User, UserRole
from kaizen.utils.exceptions import ForbiddenError


class Capability(str, enum.Enum):
    """권한 이름 — Named permissions held by roles."""

    IDEA_SUBMIT = "idea:submit"
    IDEA_BROWSE = "idea:browse"
    IDEA_EDIT_OWN = "idea:edit_own"
    IDEA_REVIEW = "idea:review"
    STATS_READ = "stats:read"
    NOTIFICATION_READ = "notification:read"
    LEADERBOARD_READ = "leaderboard:read"
    USER_MANAGE = "user:manage"


_BASE: frozenset[Capability] = frozenset({
    Capability.IDEA_SUBMIT,
    Capability.IDEA_BROWSE,
    Capability.IDEA_EDIT_OWN,
    Capability.NOTIFICATION_READ,
    Capability.LEADERBOARD_READ,
})
_REVIEW: frozenset[Capability] = _BASE | {Capability.IDEA_REVIEW, Capability.STATS_READ}

ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.EMPLOYEE: _BASE,
    UserRole.REVIEWER: _REVIEW,
    UserRole.ADMIN: _REVIEW | {Capability.USER_MANAGE},
}


def has_capability(user: User, capability: Capability) -> bool:
    """사용자의 역할이 권한을 가지는지 확인합니다.

    Return True if the user's role grants the capability. Unknown roles
    grant nothing.
    """
    try:
        role = UserRole(user.role)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES[role]


def ensure_capability(user: User, capability: Capability) -> None:
    """권한이 없으면 ForbiddenError를 발생시킵니다.

    Raise ForbiddenError unless the user's role grants the capability.

    Args:
        user: 인증된 사용자 (Authenticated user, role loaded from the DB)
        capability: 필요한 권한 (Required capability)

    Raises:
        ForbiddenError: 역할에 권한이 없음 (Role lacks the capability)
    """
    if not has_capability(user, capability):
        raise ForbiddenError()
