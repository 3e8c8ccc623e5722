"""Onboarding quiz endpoints.

Sessions live in the in-process registry on app.state; the engine is built
per request so it persists through the request's DB session.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List

from ..core.errors import ValidationError
from ..core.logger import setup_logger
from ..core.security import get_current_user
from ..database.models import User
from ..database.session import get_db
from ..quiz.engine import QuizEngine, QuizSession
from ..quiz.sessions import QuizSessionRegistry
from ..quiz.steps import QUIZ_STEPS, TOTAL_STEPS, QuizStep, get_step
from ..quiz.summary import describe_profile
from ..schemas.schemas import ProfileResponse, QuizAnswer, QuizOption, QuizState, QuizStepInfo
from ..services.profile_store import ProfileStore, SqlKeyValueStore, remote_profile_sync

router = APIRouter()
logger = setup_logger(__name__)


def get_registry(request: Request) -> QuizSessionRegistry:
    return request.app.state.quiz_sessions


def get_engine(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> QuizEngine:
    return QuizEngine(ProfileStore(SqlKeyValueStore(db)), sync=remote_profile_sync(db, user.id))


def _step_info(step: QuizStep) -> QuizStepInfo:
    options = []
    if step.labels:
        options = [QuizOption(value=value.value, label=label) for value, label in step.labels.items()]
    return QuizStepInfo(number=step.number, field=step.field, kind=step.kind.value,
                        title=step.title, options=options)


def _state(session: QuizSession, registry: QuizSessionRegistry) -> QuizState:
    state = QuizState(
        session_id=session.session_id,
        current_step=session.current_step,
        total_steps=TOTAL_STEPS,
        progress=session.progress,
        finished=session.finished,
        answers=jsonable_encoder(session.answers),
    )
    if session.finished:
        state.profile = session.profile
        if session.profile is not None:
            state.summary = describe_profile(session.profile)
        state.auto_close_seconds = registry.auto_close_seconds
    else:
        state.step = _step_info(get_step(session.current_step))
    return state


def _owned_session(session_id: str, user: User, registry: QuizSessionRegistry) -> QuizSession:
    session = registry.get(session_id, user.id)
    if session is None:
        raise HTTPException(status_code=404, detail="Sessão do quiz não encontrada ou encerrada")
    return session


@router.get("/steps", response_model=List[QuizStepInfo])
def list_steps():
    return [_step_info(step) for step in QUIZ_STEPS]


@router.post("/sessions", response_model=QuizState, status_code=201)
def start_quiz(user: User = Depends(get_current_user), engine: QuizEngine = Depends(get_engine),
               registry: QuizSessionRegistry = Depends(get_registry)):
    """Open the quiz; always starts over at step 1."""
    session = registry.open(engine.start(user.id))
    return _state(session, registry)


@router.get("/sessions/{session_id}", response_model=QuizState)
def get_quiz(session_id: str, user: User = Depends(get_current_user),
             registry: QuizSessionRegistry = Depends(get_registry)):
    return _state(_owned_session(session_id, user, registry), registry)


@router.post("/sessions/{session_id}/next", response_model=QuizState)
def next_step(session_id: str, payload: QuizAnswer, user: User = Depends(get_current_user),
              engine: QuizEngine = Depends(get_engine),
              registry: QuizSessionRegistry = Depends(get_registry)):
    session = _owned_session(session_id, user, registry)
    was_finished = session.finished
    try:
        engine.advance(session, payload.answers)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail={"message": e.message, "fields": e.fields})
    except SQLAlchemyError as e:
        logger.exception("Saving quiz profile failed")
        raise HTTPException(status_code=500, detail="Erro ao salvar perfil") from e

    if session.finished and not was_finished:
        registry.schedule_auto_close(session.session_id)
    return _state(session, registry)


@router.post("/sessions/{session_id}/back", response_model=QuizState)
def previous_step(session_id: str, user: User = Depends(get_current_user),
                  engine: QuizEngine = Depends(get_engine),
                  registry: QuizSessionRegistry = Depends(get_registry)):
    session = _owned_session(session_id, user, registry)
    engine.retreat(session)
    return _state(session, registry)


@router.post("/sessions/{session_id}/complete", response_model=ProfileResponse)
def complete_quiz(session_id: str, user: User = Depends(get_current_user),
                  engine: QuizEngine = Depends(get_engine),
                  registry: QuizSessionRegistry = Depends(get_registry)):
    """Leave the result screen before the auto-close fires."""
    session = _owned_session(session_id, user, registry)
    if not session.finished:
        raise HTTPException(status_code=400, detail="Quiz ainda não foi concluído")
    try:
        profile = engine.finalize(session)
    except SQLAlchemyError as e:
        logger.exception("Saving quiz profile failed")
        raise HTTPException(status_code=500, detail="Erro ao salvar perfil") from e
    registry.close(session.session_id)
    return ProfileResponse(profile=profile, summary=describe_profile(profile))


@router.delete("/sessions/{session_id}")
def close_quiz(session_id: str, user: User = Depends(get_current_user),
               registry: QuizSessionRegistry = Depends(get_registry)):
    """Dismiss the quiz; answers of an unfinished session are discarded."""
    session = _owned_session(session_id, user, registry)
    registry.close(session.session_id)
    return {"status": "closed", "session_id": session_id}
