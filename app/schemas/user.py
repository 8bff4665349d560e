from pydantic import BaseModel, EmailStr
from app.models.user import UserRole
from typing import Optional
from app.schemas.common import NonBlankStr

class UserBase(BaseModel):
    name: NonBlankStr
    email: EmailStr
    phone: NonBlankStr
    role: UserRole = UserRole.staff

class UserCreate(UserBase):
    pass

class UserUpdate(BaseModel):
    name: Optional[NonBlankStr] = None
    email: Optional[EmailStr] = None
    phone: Optional[NonBlankStr] = None
    role: Optional[UserRole] = None

    class Config:
        from_attributes = True

class User(UserBase):
    id: int

    class Config:
        from_attributes = True
