"""Tests for the onboarding quiz engine"""
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from selva_app.core.errors import RemoteSyncError, ValidationError
from selva_app.quiz.engine import QuizEngine
from selva_app.quiz.steps import (
    ActivityLevel, Gender, Goal, Protein, Restriction, RESULT_STEP, TOTAL_STEPS,
)
from selva_app.services.profile_store import InMemoryKeyValueStore, ProfileStore

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0)

ANSWERS = [
    {"goal": "lose_weight"},
    {"age": "30", "gender": "male", "weight": "90", "height": "180", "goal_weight": "80"},
    {"activity_level": "active"},
    {"stress_level": "high"},
    {"sleep_quality": "poor"},
    {"hydration": "good"},
    {"current_habits": ["skip_breakfast", "late_snacks"]},
    {"favorite_proteins": ["beef", "eggs"]},
    {"restrictions": ["lactose"]},
    {"routine": "regular"},
]


@pytest.fixture
def store():
    return ProfileStore(InMemoryKeyValueStore())


@pytest.fixture
def synced():
    return []


@pytest.fixture
def engine(store, synced):
    return QuizEngine(store, sync=synced.append, clock=lambda: FIXED_NOW)


def run_quiz(engine, session):
    for form in ANSWERS:
        engine.advance(session, form)
    return session


def test_start_fresh_session(engine):
    """Test a new session starts at step 1 with no answers"""
    session = engine.start(7)
    assert session.current_step == 1
    assert session.answers == {}
    assert session.user_id == 7
    assert not session.finished


def test_each_start_is_independent(engine):
    """Test re-opening never resumes partial answers"""
    first = engine.start(1)
    engine.advance(first, ANSWERS[0])
    second = engine.start(1)
    assert second.current_step == 1
    assert second.answers == {}
    assert second.session_id != first.session_id


def test_missing_single_choice_keeps_step(engine):
    """Test validation failure leaves the session untouched"""
    session = engine.start(1)
    with pytest.raises(ValidationError) as exc:
        engine.advance(session, {})
    assert exc.value.message == "Por favor, selecione seu objetivo"
    assert exc.value.fields == ["goal"]
    assert session.current_step == 1
    assert session.answers == {}


def test_unknown_choice_rejected(engine):
    """Test values outside the enumeration are rejected"""
    session = engine.start(1)
    with pytest.raises(ValidationError):
        engine.advance(session, {"goal": "fly"})
    assert session.current_step == 1


def test_physical_step_missing_fields(engine):
    """Test the physical step names the missing inputs"""
    session = engine.start(1)
    engine.advance(session, ANSWERS[0])
    with pytest.raises(ValidationError) as exc:
        engine.advance(session, {"age": "30", "gender": "female", "weight": "70"})
    assert exc.value.message == "Por favor, preencha todos os dados físicos"
    assert exc.value.fields == ["height"]
    assert session.current_step == 2


def test_physical_step_non_numeric(engine):
    """Test non-numeric physical values are rejected"""
    session = engine.start(1)
    engine.advance(session, ANSWERS[0])
    with pytest.raises(ValidationError) as exc:
        engine.advance(session, {"age": "abc", "gender": "male", "weight": "80", "height": "175"})
    assert exc.value.fields == ["age"]
    assert session.current_step == 2


def test_physical_step_computes_bmi_and_defaults_goal_weight(engine):
    """Test BMI is computed and goal weight defaults to current weight"""
    collected = engine.validate_and_collect(
        2, {"age": "25", "gender": "female", "weight": "64", "height": "160"}
    )
    assert collected["age"] == 25
    assert collected["gender"] == Gender.FEMALE
    assert collected["height"] == 160
    assert collected["goal_weight"] == 64.0
    assert collected["bmi"] == 25.0


def test_multiple_choice_empty_is_valid(engine):
    """Test multiple-choice steps accept an empty selection"""
    assert engine.validate_and_collect(7, {}) == {"current_habits": []}
    assert engine.validate_and_collect(8, {"favorite_proteins": []}) == {"favorite_proteins": []}


def test_multiple_choice_deduplicates(engine):
    """Test duplicate selections collapse keeping the first occurrence"""
    collected = engine.validate_and_collect(8, {"favorite_proteins": ["fish", "beef", "fish"]})
    assert collected == {"favorite_proteins": [Protein.FISH, Protein.BEEF]}


def test_retreat_bounds(engine):
    """Test retreat is a no-op on step 1 and on the result screen"""
    session = engine.start(1)
    engine.retreat(session)
    assert session.current_step == 1

    engine.advance(session, ANSWERS[0])
    engine.advance(session, ANSWERS[1])
    engine.retreat(session)
    assert session.current_step == 2

    session = run_quiz(engine, engine.start(2))
    engine.retreat(session)
    assert session.current_step == RESULT_STEP


def test_full_quiz_finalizes_profile(engine, store):
    """Test completing the last step builds and stores the profile"""
    session = run_quiz(engine, engine.start(1))
    assert session.finished
    assert session.progress == 100.0

    profile = session.profile
    assert profile.goal == Goal.LOSE_WEIGHT
    assert profile.weight == 90.0
    assert profile.height == 180
    assert profile.goal_weight == 80.0
    assert profile.bmi == 27.8
    assert profile.activity_level == ActivityLevel.ACTIVE
    assert profile.current_habits == ["skip_breakfast", "late_snacks"]
    assert profile.restrictions == [Restriction.LACTOSE]
    assert profile.quiz_completed is True
    assert profile.completed_at == FIXED_NOW

    assert store.load(1) == profile


def test_finalize_syncs_compact_fields(engine, synced):
    """Test the remote sync receives the compact profile fields"""
    run_quiz(engine, engine.start(1))
    assert synced == [{
        "weight": 90.0,
        "height": 180,
        "goal": "lose_weight",
        "goal_weight": 80.0,
        "quiz_completed": True,
    }]


def test_finalize_runs_once(engine, store, synced):
    """Test finalize is idempotent and advancing past the result is a no-op"""
    session = run_quiz(engine, engine.start(1))
    first = session.profile
    assert engine.finalize(session) is first
    engine.advance(session, {"goal": "energy"})
    assert session.current_step == RESULT_STEP
    assert len(synced) == 1


def test_finalize_requires_result_step(engine):
    """Test finalize refuses an unfinished session"""
    with pytest.raises(ValueError):
        engine.finalize(engine.start(1))


def test_sync_failure_is_not_fatal(store):
    """Test a failing remote sync keeps the local profile"""
    def failing_sync(payload):
        raise ConnectionError("server down")

    engine = QuizEngine(store, sync=failing_sync, clock=lambda: FIXED_NOW)
    session = run_quiz(engine, engine.start(3))
    assert session.finished
    assert store.load(3).quiz_completed is True


def test_sync_errors_are_wrapped(store):
    """Test arbitrary sync failures surface as RemoteSyncError"""
    def failing_sync(payload):
        raise ConnectionError("server down")

    engine = QuizEngine(store, sync=failing_sync)
    profile = run_quiz(engine, engine.start(3)).profile
    with pytest.raises(RemoteSyncError):
        engine._sync(profile)


def test_quiz_overwrites_previous_profile(engine, store):
    """Test a completed quiz replaces the stored document instead of merging"""
    run_quiz(engine, engine.start(1))
    session = engine.start(1)
    answers = list(ANSWERS)
    answers[8] = {"restrictions": []}
    for form in answers:
        engine.advance(session, form)
    assert store.load(1).restrictions == []


def test_total_steps():
    assert TOTAL_STEPS == 10
    assert RESULT_STEP == 11


class FlakyStore(ProfileStore):
    """Profile store whose first save fails like a locked SQLite file."""

    def __init__(self):
        super().__init__(InMemoryKeyValueStore())
        self.failures = 1

    def save(self, user_id, profile):
        if self.failures:
            self.failures -= 1
            raise OperationalError("INSERT INTO kv_entries", {}, Exception("database is locked"))
        super().save(user_id, profile)


def test_failed_save_keeps_last_step_and_retries():
    """Test a failed profile save is not reported as a finished quiz"""
    store = FlakyStore()
    engine = QuizEngine(store, clock=lambda: FIXED_NOW)
    session = engine.start(1)
    for form in ANSWERS[:-1]:
        engine.advance(session, form)

    with pytest.raises(OperationalError):
        engine.advance(session, ANSWERS[-1])
    assert session.current_step == TOTAL_STEPS
    assert session.profile is None
    assert store.load(1) is None

    engine.advance(session, ANSWERS[-1])
    assert session.finished
    assert store.load(1) == session.profile


def test_finalize_retries_after_failed_save():
    """Test finalize saves again instead of returning an unsaved profile"""
    store = FlakyStore()
    engine = QuizEngine(store, clock=lambda: FIXED_NOW)
    session = engine.start(1)
    for form in ANSWERS[:-1]:
        engine.advance(session, form)
    session.answers.update(engine.validate_and_collect(TOTAL_STEPS, ANSWERS[-1]))
    session.current_step = RESULT_STEP

    with pytest.raises(OperationalError):
        engine.finalize(session)
    assert session.profile is None

    profile = engine.finalize(session)
    assert store.load(1) == profile


def test_step_numbers_out_of_range(engine):
    """Test step numbers outside 1..10 are rejected"""
    with pytest.raises(ValueError):
        engine.validate_and_collect(0, {"routine": "regular"})
    with pytest.raises(ValueError):
        engine.validate_and_collect(TOTAL_STEPS + 1, {})
