# app/crud/crud_user.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


def _commit(db: Session, db_user: User) -> User:
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_users(db: Session, skip: int = 0, limit: int = 100) -> List[User]:
    """Personal de la estación ordenado por nombre."""
    return db.query(User).order_by(User.name).offset(skip).limit(limit).all()


def create_user(db: Session, user_data: UserCreate) -> User:
    return _commit(db, User(**user_data.model_dump()))


def update_user(db: Session, db_user: User, user_in: UserUpdate) -> User:
    """
    Solo se tocan los campos enviados; un null explícito se ignora
    (todas las columnas son obligatorias).
    """
    changes = {
        field: value
        for field, value in user_in.model_dump(exclude_unset=True).items()
        if value is not None
    }
    for field, value in changes.items():
        setattr(db_user, field, value)
    return _commit(db, db_user)


def delete_user(db: Session, db_user: User) -> None:
    """Borrado físico (no hay historial de usuarios)."""
    db.delete(db_user)
    db.commit()
