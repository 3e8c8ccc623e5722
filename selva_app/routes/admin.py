"""Admin endpoints for user management and global statistics."""
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from ..core.logger import setup_logger
from ..core.security import require_admin
from ..database.models import Meal, SavedRecipe, User
from ..database.session import get_db
from ..schemas.schemas import AdminStats, AdminUser, CompactProfile, RoleUpdate
from ..services.profile_store import SqlKeyValueStore, profile_key

router = APIRouter()
logger = setup_logger(__name__)

ROLES = ("user", "admin")


@router.get("/users", response_model=List[AdminUser])
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    logger.info(f"[Admin] {len(users)} users listed by {admin.email}")
    return [
        AdminUser(
            id=u.id,
            name=u.name,
            email=u.email,
            role=u.role or "user",
            created_at=u.created_at,
            profile=CompactProfile.model_validate(u.profile) if u.profile else CompactProfile(goal="lose"),
        )
        for u in users
    ]


@router.delete("/users/{user_id}")
def delete_user(user_id: int, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Delete a user with their meals, recipes, progress and profile."""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Você não pode remover sua própria conta de admin")

    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")

    try:
        SqlKeyValueStore(db).delete(profile_key(user_id))
        db.delete(db_user)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Admin delete user failed")
        raise HTTPException(status_code=500, detail="Erro ao remover usuário") from e
    return {"message": "Usuário removido com sucesso"}


@router.patch("/users/{user_id}/role")
def update_role(user_id: int, payload: RoleUpdate, admin: User = Depends(require_admin),
                db: Session = Depends(get_db)):
    if payload.role not in ROLES:
        raise HTTPException(status_code=400, detail="Role inválida")

    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    db_user.role = payload.role
    db.commit()
    return {"message": f"Usuário atualizado para {payload.role}"}


@router.get("/stats", response_model=AdminStats)
def stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    return AdminStats(
        total_users=db.query(User).count(),
        total_meals=db.query(Meal).count(),
        total_recipes=db.query(SavedRecipe).count(),
        new_users_today=db.query(User).filter(
            User.created_at >= today, User.created_at < today + timedelta(days=1)
        ).count(),
    )
