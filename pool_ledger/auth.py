"""Role-based authorization for privileged pool operations."""

from enum import Enum
from typing import Protocol


class Role(str, Enum):
    """Roles recognised by the engine."""
    OWNER = "owner"
    INVESTOR = "investor"
    PAUSER = "pauser"


class Authorizer(Protocol):
    """Decides whether ``caller`` may act as ``role``."""

    def __call__(self, caller: str, role: Role) -> bool: ...


class RoleRegistry:
    """
    Default authorizer: one holder per role.

    The engine calls the registry before every privileged operation and
    reassigns the investor and pauser holders through its role setters.
    """

    def __init__(self, owner: str, investor: str, pauser: str):
        self._holders: dict[Role, str] = {
            Role.OWNER: owner,
            Role.INVESTOR: investor,
            Role.PAUSER: pauser,
        }

    def __call__(self, caller: str, role: Role) -> bool:
        return self._holders.get(role) == caller

    def holder(self, role: Role) -> str:
        return self._holders[role]

    def assign(self, role: Role, holder: str) -> str:
        """Assign ``role`` to ``holder`` and return the previous holder."""
        previous = self._holders[role]
        self._holders[role] = holder
        return previous
