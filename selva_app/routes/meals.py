"""Meal logging endpoints."""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.logger import setup_logger
from ..core.security import get_current_user
from ..database.models import Meal, User
from ..database.session import get_db
from ..schemas.schemas import MealCreate, MealResponse, MealStats
from ..services.meals import MEAL_TYPES, calculate_streak

router = APIRouter()
logger = setup_logger(__name__)


@router.post("", response_model=MealResponse, status_code=201)
def create_meal(payload: MealCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not payload.name.strip() or not payload.type:
        raise HTTPException(status_code=400, detail="Nome e tipo da refeição são obrigatórios")
    if payload.type not in MEAL_TYPES:
        raise HTTPException(status_code=400, detail="Tipo de refeição inválido")

    meal = Meal(
        user_id=user.id,
        name=payload.name.strip(),
        type=payload.type,
        description=payload.description or "",
        photo_url=payload.photo_url or "",
    )
    db.add(meal)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Create meal failed")
        raise HTTPException(status_code=500, detail="Erro ao registrar refeição") from e
    db.refresh(meal)
    return meal


@router.get("", response_model=List[MealResponse])
def list_meals(filter: Optional[str] = None, limit: Optional[int] = Query(None, ge=1),
               user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Newest first, optionally filtered by meal type ('all' disables the filter)."""
    query = db.query(Meal).filter(Meal.user_id == user.id)
    if filter and filter != "all":
        query = query.filter(Meal.type == filter)
    query = query.order_by(Meal.created_at.desc(), Meal.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


@router.get("/stats", response_model=MealStats)
def meal_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    rows = (
        db.query(Meal.type, func.count(Meal.id))
        .filter(Meal.user_id == user.id)
        .group_by(Meal.type)
        .all()
    )
    by_type = {meal_type: count for meal_type, count in rows}
    days = {created.date() for (created,) in db.query(Meal.created_at).filter(Meal.user_id == user.id)}
    return MealStats(
        total_meals=sum(by_type.values()),
        meals_by_type=by_type,
        streak=calculate_streak(days, datetime.utcnow().date()),
    )


@router.delete("/{meal_id}")
def delete_meal(meal_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = db.query(Meal).filter(Meal.id == meal_id, Meal.user_id == user.id).delete()
    db.commit()
    if not deleted:
        raise HTTPException(status_code=404, detail="Refeição não encontrada")
    return {"message": "Refeição removida"}
