import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies import backend_failure
from app.crud import crud_user
from app.db.database import get_db
from app.models.user import User as UserModel
from app.schemas.user import User, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_TAKEN = "Email already registered"


def _user_or_404(user_id: int, db: Session = Depends(get_db)) -> UserModel:
    db_user = crud_user.get_user_by_id(db, user_id=user_id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, db: Session = Depends(get_db)):
    if crud_user.get_user_by_email(db, email=user_in.email):
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)
    try:
        db_user = crud_user.create_user(db, user_in)
    except SQLAlchemyError as e:
        db.rollback()
        raise backend_failure("Failed to save user", e)
    logger.info("User %s created (%s)", db_user.id, db_user.role.value)
    return db_user


@router.get("/users", response_model=List[User])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """ Personal de la estación """
    return crud_user.get_users(db, skip=skip, limit=limit)


@router.get("/users/{user_id}", response_model=User)
def read_user(db_user: UserModel = Depends(_user_or_404)):
    return db_user


@router.patch("/users/{user_id}", response_model=User)
def update_user(
    user_in: UserUpdate,
    db_user: UserModel = Depends(_user_or_404),
    db: Session = Depends(get_db),
):
    """
    Cambia nombre, email, teléfono o rol.
    El email sigue siendo único entre todo el personal.
    """
    if user_in.email:
        owner = crud_user.get_user_by_email(db, email=user_in.email)
        if owner and owner.id != db_user.id:
            raise HTTPException(status_code=400, detail=EMAIL_TAKEN)
    try:
        return crud_user.update_user(db, db_user, user_in)
    except SQLAlchemyError as e:
        db.rollback()
        raise backend_failure("Failed to save user", e)


@router.delete("/users/{user_id}", response_model=User)
def delete_user(db_user: UserModel = Depends(_user_or_404), db: Session = Depends(get_db)):
    # la respuesta se arma antes de borrar la fila
    deleted = User.model_validate(db_user)
    try:
        crud_user.delete_user(db, db_user)
    except SQLAlchemyError as e:
        db.rollback()
        raise backend_failure("Failed to delete user", e)
    logger.info("User %s deleted", deleted.id)
    return deleted
