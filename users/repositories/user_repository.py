from typing import List, Optional, Sequence

from users.entities.user import UserOut

DEMO_USERS: Sequence[UserOut] = (
    UserOut(id=1, name="John Doe", email="john@example.com", role="Developer"),
    UserOut(id=2, name="Jane Smith", email="jane@example.com", role="Designer"),
    UserOut(id=3, name="Bob Johnson", email="bob@example.com", role="Manager"),
    UserOut(id=4, name="Alice Williams", email="alice@example.com", role="Developer"),
    UserOut(id=5, name="Charlie Brown", email="charlie@example.com", role="DevOps"),
)


class InMemoryUserRepository:
    """Read-only user directory backed by a fixed list."""

    def __init__(self, users: Optional[Sequence[UserOut]] = None) -> None:
        self._users = tuple(DEMO_USERS if users is None else users)

    async def list(self) -> List[UserOut]:
        return list(self._users)
