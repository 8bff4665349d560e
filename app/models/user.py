# app/models/user.py
from sqlalchemy import Column, Integer, String, Enum as SAEnum
from app.db.database import Base
import enum

class UserRole(str, enum.Enum):
    staff = "staff"
    admin = "admin"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=False)
    role = Column(SAEnum(UserRole), nullable=False, default=UserRole.staff)
