"""Tests for the profile document store and profile precedence"""
from selva_app.database.models import KeyValueEntry, Profile, User
from selva_app.quiz.steps import Goal, Protein
from selva_app.schemas.schemas import UserProfile
from selva_app.services.profile_store import (
    InMemoryKeyValueStore, ProfileStore, SqlKeyValueStore, apply_profile_update,
    mirror_form_update, profile_from_row, resolve_profile,
)


def quiz_profile(**overrides):
    data = dict(
        goal="gain_muscle", age=28, gender="female", weight=60.0, height=165,
        goal_weight=65.0, bmi=22.0, favorite_proteins=["chicken"], quiz_completed=True,
    )
    data.update(overrides)
    return UserProfile(**data)


def test_in_memory_round_trip():
    """Test load returns what save stored and None otherwise"""
    store = ProfileStore(InMemoryKeyValueStore())
    assert store.load(1) is None
    profile = quiz_profile()
    store.save(1, profile)
    assert store.load(1) == profile
    assert store.load(2) is None


def test_last_write_wins():
    store = ProfileStore(InMemoryKeyValueStore())
    store.save(1, quiz_profile(weight=60.0))
    store.save(1, quiz_profile(weight=58.0))
    assert store.load(1).weight == 58.0


def test_sql_store(db_session):
    """Test the SQL-backed store persists JSON documents in kv_entries"""
    store = ProfileStore(SqlKeyValueStore(db_session))
    store.save(5, quiz_profile())
    store.save(5, quiz_profile(age=29))
    assert db_session.query(KeyValueEntry).count() == 1
    loaded = store.load(5)
    assert loaded.age == 29
    assert loaded.favorite_proteins == [Protein.CHICKEN]


def test_unreadable_document_is_ignored():
    kv = InMemoryKeyValueStore()
    kv.set("user_profile:1", {"age": "not a number"})
    assert ProfileStore(kv).load(1) is None


def test_profile_from_row_widens_compact_fields():
    row = Profile(weight=80.0, height=175.5, goal="lose", goal_weight=75.0, quiz_completed=False)
    profile = profile_from_row(row)
    assert profile.goal == Goal.LOSE_WEIGHT
    assert profile.height == 175
    assert profile.bmi == 26.0
    assert profile.quiz_completed is False
    assert profile_from_row(None) is None


def test_resolve_remote_completed_wins():
    """Test a quiz-completed server row overrides the stored document field by field"""
    remote = UserProfile(weight=58.0, height=165, goal="gain_muscle", goal_weight=62.0, quiz_completed=True)
    local = quiz_profile(weight=60.0)
    resolved = resolve_profile(remote, local)
    assert resolved.weight == 58.0
    assert resolved.goal_weight == 62.0
    # Fields the server does not keep come from the document
    assert resolved.age == 28
    assert resolved.favorite_proteins == [Protein.CHICKEN]
    assert resolved.bmi == 21.3


def test_resolve_remote_not_completed_uses_local():
    remote = UserProfile(weight=99.0, quiz_completed=False)
    local = quiz_profile()
    assert resolve_profile(remote, local) == local


def test_resolve_fallbacks():
    remote = UserProfile(weight=70.0)
    assert resolve_profile(remote, None) == remote
    assert resolve_profile(None, None) is None
    completed = UserProfile(weight=70.0, quiz_completed=True)
    assert resolve_profile(completed, None) is completed


def test_apply_profile_update_creates_row(db_session):
    user = User(name="Bia", email="bia@example.com", password="x")
    db_session.add(user)
    db_session.commit()

    row = apply_profile_update(db_session, user.id, {"weight": 70.0, "goal": None, "quiz_completed": True})
    assert row.weight == 70.0
    assert row.quiz_completed is True
    # None leaves the column default alone
    assert row.goal == "lose"


def test_mirror_form_update_recomputes_bmi():
    store = ProfileStore(InMemoryKeyValueStore())
    store.save(1, quiz_profile())
    mirrored = mirror_form_update(store, 1, {"weight": 70.0, "goal": "maintain", "name": "ignored"})
    assert mirrored.weight == 70.0
    assert mirrored.goal == Goal.HEALTH
    assert mirrored.bmi == 25.7
    assert mirrored.age == 28
    assert store.load(1) == mirrored
