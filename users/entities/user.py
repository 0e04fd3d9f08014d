from typing import List

from pydantic import BaseModel, EmailStr


class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    role: str

    class Config:
        from_attributes = True


class UserListOut(BaseModel):
    success: bool = True
    count: int
    data: List[UserOut]
