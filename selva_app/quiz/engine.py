"""Onboarding quiz state machine.

A QuizSession is a plain value owned by the caller. The engine moves it one
step at a time (advance/retreat), validates the raw form inputs of each
step, and finalizes the accumulated answers into a UserProfile once the
last question is answered.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
import uuid

from selva_app.core.errors import RemoteSyncError, ValidationError
from selva_app.core.logger import setup_logger
from selva_app.core.utils import calculate_bmi
from selva_app.quiz.steps import (
    Gender, QuizStep, StepKind, RESULT_STEP, TOTAL_STEPS, get_step,
)
from selva_app.schemas.schemas import UserProfile

logger = setup_logger(__name__)

PHYSICAL_LABELS = {
    "age": "idade",
    "gender": "sexo",
    "weight": "peso",
    "height": "altura",
    "goal_weight": "peso meta",
}


@dataclass
class QuizSession:
    user_id: Optional[int] = None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    current_step: int = 1
    answers: Dict[str, Any] = field(default_factory=dict)
    # Set exactly once, when the session reaches the result screen
    profile: Optional[UserProfile] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def finished(self) -> bool:
        return self.current_step == RESULT_STEP

    @property
    def progress(self) -> float:
        """Percentage shown in the progress bar."""
        return round(min(self.current_step, TOTAL_STEPS) / TOTAL_STEPS * 100, 1)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value, cast):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number:  # NaN
        return None
    return int(number) if cast is int else number


def _collect_single(step: QuizStep, form: Mapping) -> Dict[str, Any]:
    value = form.get(step.field)
    if _is_blank(value):
        raise ValidationError(step.error_message, [step.field])
    try:
        choice = step.choices(value)
    except ValueError:
        raise ValidationError("Opção inválida, selecione uma das alternativas", [step.field])
    return {step.field: choice}


def _collect_multiple(step: QuizStep, form: Mapping) -> Dict[str, Any]:
    raw = form.get(step.field)
    if _is_blank(raw):
        raw = []
    elif isinstance(raw, str):
        raw = [raw]

    selected: List[Any] = []
    for value in raw:
        if _is_blank(value):
            continue
        if step.choices is not None:
            try:
                value = step.choices(value)
            except ValueError:
                raise ValidationError("Opção inválida, selecione uma das alternativas", [step.field])
        else:
            value = str(value).strip()
        if value not in selected:
            selected.append(value)
    return {step.field: selected}


def _collect_physical(step: QuizStep, form: Mapping) -> Dict[str, Any]:
    required = ("age", "gender", "weight", "height")
    missing = [name for name in required if _is_blank(form.get(name))]
    if missing:
        raise ValidationError(step.error_message, missing)

    age = _parse_number(form.get("age"), int)
    weight = _parse_number(form.get("weight"), float)
    height = _parse_number(form.get("height"), int)
    invalid = [name for name, value in (("age", age), ("weight", weight), ("height", height))
               if value is None or value <= 0]
    try:
        gender = Gender(form.get("gender"))
    except ValueError:
        gender = None
        invalid.append("gender")

    goal_weight_raw = form.get("goal_weight")
    if _is_blank(goal_weight_raw):
        goal_weight = weight
    else:
        goal_weight = _parse_number(goal_weight_raw, float)
        if goal_weight is None or goal_weight <= 0:
            invalid.append("goal_weight")

    if invalid:
        labels = ", ".join(PHYSICAL_LABELS[name] for name in invalid)
        raise ValidationError(f"Valores inválidos: {labels}", invalid)

    return {
        "age": age,
        "gender": gender,
        "weight": weight,
        "height": height,
        "goal_weight": goal_weight,
        "bmi": calculate_bmi(weight, height),
    }


class QuizEngine:
    """Drives a QuizSession through the ten onboarding steps.

    `store` persists the finalized profile (ProfileStore interface: load/save).
    `sync` is the optional remote profile-update collaborator; it receives
    {weight, height, goal, goal_weight, quiz_completed} and its failures are
    logged, never raised.
    """

    def __init__(self, store, sync: Optional[Callable[[dict], None]] = None,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self.store = store
        self.sync = sync
        self.clock = clock

    def start(self, user_id: Optional[int] = None) -> QuizSession:
        """Always a fresh session at step 1; partial answers are never resumed."""
        now = self.clock()
        return QuizSession(user_id=user_id, created_at=now, updated_at=now)

    def validate_and_collect(self, step: int, form: Mapping) -> Dict[str, Any]:
        """Validate the raw inputs of one step and return the fields it contributes."""
        form = form or {}
        quiz_step = get_step(step)
        if quiz_step.kind == StepKind.SINGLE:
            return _collect_single(quiz_step, form)
        if quiz_step.kind == StepKind.MULTIPLE:
            return _collect_multiple(quiz_step, form)
        return _collect_physical(quiz_step, form)

    def advance(self, session: QuizSession, form: Mapping) -> QuizSession:
        """Collect the current step and move forward.

        Raises ValidationError without touching the session when the inputs
        are incomplete. Passing the last step moves to the result screen and
        finalizes the profile.
        """
        if session.finished:
            return session

        collected = self.validate_and_collect(session.current_step, form)
        session.answers.update(collected)
        session.current_step += 1
        session.updated_at = self.clock()

        if session.current_step > TOTAL_STEPS:
            session.current_step = RESULT_STEP
            try:
                self.finalize(session)
            except Exception:
                # Stay on the last question so the user can submit it again
                session.current_step = TOTAL_STEPS
                raise
        return session

    def retreat(self, session: QuizSession) -> QuizSession:
        if 1 < session.current_step <= TOTAL_STEPS:
            session.current_step -= 1
            session.updated_at = self.clock()
        return session

    def finalize(self, session: QuizSession) -> UserProfile:
        """Build, persist and sync the profile; runs once per session."""
        if session.profile is not None:
            return session.profile
        if not session.finished:
            raise ValueError(f"Quiz session {session.session_id} has not reached the result step")

        answers = session.answers
        profile = UserProfile(
            goal=answers.get("goal"),
            age=answers.get("age"),
            gender=answers.get("gender"),
            weight=answers.get("weight"),
            height=answers.get("height"),
            goal_weight=answers.get("goal_weight"),
            bmi=answers.get("bmi"),
            activity_level=answers.get("activity_level"),
            stress_level=answers.get("stress_level"),
            sleep_quality=answers.get("sleep_quality"),
            hydration=answers.get("hydration"),
            current_habits=answers.get("current_habits") or [],
            favorite_proteins=answers.get("favorite_proteins") or [],
            restrictions=answers.get("restrictions") or [],
            routine=answers.get("routine"),
            quiz_completed=True,
            completed_at=self.clock(),
        )
        # Local persistence is authoritative: a completed quiz overwrites any previous profile
        self.store.save(session.user_id, profile)
        session.profile = profile

        if self.sync is not None:
            try:
                self._sync(profile)
            except RemoteSyncError as e:
                logger.warning(f"Profile sync failed for user {session.user_id}: {e}")
        return profile

    def _sync(self, profile: UserProfile):
        payload = {
            "weight": profile.weight,
            "height": profile.height,
            "goal": profile.goal.value if profile.goal else None,
            "goal_weight": profile.goal_weight,
            "quiz_completed": True,
        }
        try:
            self.sync(payload)
        except RemoteSyncError:
            raise
        except Exception as e:
            raise RemoteSyncError(str(e)) from e
