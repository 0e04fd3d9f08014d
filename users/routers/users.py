from fastapi import APIRouter, Depends

from shared.wiring import get_user_repository
from users.entities.user import UserListOut
from users.repositories.user_repository import InMemoryUserRepository

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get(
    "",
    summary="List users",
    description="Returns the demo user directory. Not cached.",
    response_model=UserListOut,
    responses={
        200: {
            "description": "All users.",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "count": 1,
                        "data": [{"id": 1, "name": "John Doe", "email": "john@example.com", "role": "Developer"}],
                    }
                }
            },
        },
    },
)
async def list_users(repo: InMemoryUserRepository = Depends(get_user_repository)):
    users = await repo.list()
    return UserListOut(success=True, count=len(users), data=users)
