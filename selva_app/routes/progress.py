"""Weight progress endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.logger import setup_logger
from ..core.security import get_current_user
from ..database.models import ProgressEntry, User
from ..database.session import get_db
from ..schemas.schemas import (
    ChartGridLine, ChartPointResponse, ChartResponse, HistoryItemResponse,
    ProgressCreate, ProgressResponse, ProgressSummaryResponse,
)
from ..services import progress as aggregator
from ..services.profile_store import apply_profile_update

router = APIRouter()
logger = setup_logger(__name__)


def _entries(db: Session, user_id: int) -> List[ProgressEntry]:
    return (
        db.query(ProgressEntry)
        .filter(ProgressEntry.user_id == user_id)
        .order_by(ProgressEntry.date.asc(), ProgressEntry.id.asc())
        .all()
    )


@router.post("", response_model=ProgressResponse, status_code=201)
def create_entry(payload: ProgressCreate, user: User = Depends(get_current_user),
                 db: Session = Depends(get_db)):
    """Record a weight; it also becomes the profile's current weight."""
    if not payload.weight or payload.date is None:
        raise HTTPException(status_code=400, detail="Peso e data são obrigatórios")
    if payload.weight <= 0:
        raise HTTPException(status_code=400, detail="Peso inválido")

    entry = ProgressEntry(user_id=user.id, weight=payload.weight, date=payload.date,
                          notes=payload.notes or "")
    db.add(entry)
    try:
        apply_profile_update(db, user.id, {"weight": payload.weight}, commit=False)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Create progress entry failed")
        raise HTTPException(status_code=500, detail="Erro ao registrar peso") from e
    db.refresh(entry)
    return entry


@router.get("", response_model=List[HistoryItemResponse])
def get_history(limit: Optional[int] = Query(None, ge=1), user: User = Depends(get_current_user),
                db: Session = Depends(get_db)):
    """Newest first with the change from the previous weigh-in."""
    items = aggregator.history(_entries(db, user.id))
    if limit:
        items = items[:limit]
    return [HistoryItemResponse(**vars(item)) for item in items]


@router.get("/summary", response_model=ProgressSummaryResponse)
def get_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = user.profile
    summary = aggregator.summarize(
        _entries(db, user.id),
        fallback_weight=profile.weight if profile else None,
        goal_weight=profile.goal_weight if profile else None,
    )
    pct = summary.progress_percentage
    return ProgressSummaryResponse(
        start_weight=summary.start_weight,
        current_weight=summary.current_weight,
        goal_weight=summary.goal_weight,
        total_lost=summary.total_lost,
        remaining_to_goal=summary.remaining_to_goal,
        progress_percentage=round(pct) if pct is not None else None,
    )


@router.get("/chart", response_model=ChartResponse)
def get_chart(width: int = Query(600, ge=100, le=4000), height: int = Query(250, ge=100, le=2000),
              padding: int = Query(40, ge=0, le=200), user: User = Depends(get_current_user),
              db: Session = Depends(get_db)):
    entries = _entries(db, user.id)
    points = aggregator.chart_points(entries, width, height, padding)
    return ChartResponse(
        width=width,
        height=height,
        padding=padding,
        points=[ChartPointResponse(**vars(p)) for p in points],
        grid=[ChartGridLine(**line) for line in aggregator.chart_grid(entries, height, padding)],
        empty=not points,
    )


@router.get("/chart.svg")
def get_chart_svg(width: int = Query(600, ge=100, le=4000), height: int = Query(250, ge=100, le=2000),
                  user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    svg = aggregator.render_chart_svg(_entries(db, user.id), width, height)
    if svg is None:
        raise HTTPException(status_code=404, detail="Registre seu peso para ver o gráfico")
    return Response(content=svg, media_type="image/svg+xml")


@router.delete("/{entry_id}")
def delete_entry(entry_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    deleted = db.query(ProgressEntry).filter(
        ProgressEntry.id == entry_id, ProgressEntry.user_id == user.id
    ).delete()
    db.commit()
    if not deleted:
        raise HTTPException(status_code=404, detail="Registro não encontrado")
    return {"message": "Registro removido"}
