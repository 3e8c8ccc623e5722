"""Profile read/edit, password change and account deletion."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.logger import setup_logger
from ..core.security import get_current_user, hash_password, verify_password
from ..database.models import User
from ..database.session import get_db
from ..quiz.steps import normalize_goal
from ..quiz.summary import describe_profile
from .auth import MIN_PASSWORD_LENGTH
from ..schemas.schemas import (
    AccountDelete, PasswordChange, ProfileResponse, ProfileUpdate, UserResponse,
)
from ..services.profile_store import (
    ProfileStore, SqlKeyValueStore, apply_profile_update, mirror_form_update,
    profile_from_row, profile_key, resolve_profile,
)

router = APIRouter()
logger = setup_logger(__name__)


def load_resolved_profile(db: Session, user: User):
    """The profile other features should read for this user."""
    store = ProfileStore(SqlKeyValueStore(db))
    return resolve_profile(profile_from_row(user.profile), store.load(user.id))


@router.get("", response_model=ProfileResponse)
def get_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = load_resolved_profile(db, user)
    if profile is None:
        return ProfileResponse()
    return ProfileResponse(profile=profile, summary=describe_profile(profile))


@router.put("", response_model=UserResponse)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    """Update only the fields that were sent."""
    if payload.email is not None:
        email = payload.email.strip().lower()
        if not email:
            raise HTTPException(status_code=400, detail="Email não pode ficar em branco")
        taken = db.query(User).filter(User.email == email, User.id != user.id).first()
        if taken:
            raise HTTPException(status_code=409, detail="Este email já está em uso")
        user.email = email
    if payload.name is not None and payload.name.strip():
        user.name = payload.name.strip()
    if payload.goal is not None and normalize_goal(payload.goal) is None:
        raise HTTPException(status_code=400, detail="Objetivo inválido")

    fields = payload.model_dump(include={"weight", "height", "goal", "goal_weight"}, exclude_none=True)
    try:
        apply_profile_update(db, user.id, fields)
        if fields:
            mirror_form_update(ProfileStore(SqlKeyValueStore(db)), user.id, fields)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Profile update failed")
        raise HTTPException(status_code=500, detail="Erro ao atualizar perfil") from e
    db.refresh(user)
    return user


@router.put("/password")
def change_password(payload: PasswordChange, user: User = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    if not payload.current_password or not payload.new_password:
        raise HTTPException(status_code=400, detail="Senha atual e nova senha são obrigatórias")
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="A nova senha deve ter no mínimo 6 caracteres")
    if not verify_password(payload.current_password, user.password):
        raise HTTPException(status_code=401, detail="Senha atual incorreta")

    user.password = hash_password(payload.new_password)
    db.commit()
    return {"message": "Senha alterada com sucesso!"}


@router.delete("")
def delete_account(payload: AccountDelete, user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    """Delete the account and everything it owns."""
    if not payload.password:
        raise HTTPException(status_code=400, detail="Senha é obrigatória para deletar a conta")
    if not verify_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Senha incorreta")

    try:
        SqlKeyValueStore(db).delete(profile_key(user.id))
        db.delete(user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Account deletion failed")
        raise HTTPException(status_code=500, detail="Erro ao deletar conta") from e
    return {"message": "Conta deletada com sucesso"}
