"""Persistence of the onboarding profile document.

The quiz profile is a JSON document in a key-value store. The server also
keeps a compact `profiles` row (weight, height, goal, goal_weight,
quiz_completed) written by the profile form and by the quiz sync; the two
are reconciled with resolve_profile().
"""
import json
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from selva_app.core.errors import RemoteSyncError
from selva_app.core.logger import setup_logger
from selva_app.core.utils import calculate_bmi
from selva_app.database.models import KeyValueEntry, Profile
from selva_app.schemas.schemas import UserProfile

logger = setup_logger(__name__)

COMPACT_FIELDS = ("weight", "height", "goal", "goal_weight", "quiz_completed")


class InMemoryKeyValueStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[dict]:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value: dict):
        self._data[key] = json.dumps(value)


class SqlKeyValueStore:
    """Key-value documents in the kv_entries table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[dict]:
        entry = self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key).first()
        if entry is None:
            return None
        return json.loads(entry.value)

    def set(self, key: str, value: dict):
        entry = self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key).first()
        if entry is None:
            entry = KeyValueEntry(key=key)
            self.db.add(entry)
        entry.value = json.dumps(value)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def delete(self, key: str):
        self.db.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
        self.db.commit()


def profile_key(user_id: Optional[int]) -> str:
    return f"user_profile:{user_id}" if user_id is not None else "user_profile"


class ProfileStore:
    def __init__(self, kv):
        self.kv = kv

    def load(self, user_id: Optional[int]) -> Optional[UserProfile]:
        data = self.kv.get(profile_key(user_id))
        if data is None:
            return None
        try:
            return UserProfile.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Ignoring unreadable profile document for user {user_id}: {e}")
            return None

    def save(self, user_id: Optional[int], profile: UserProfile):
        """Overwrite the stored document; last write wins."""
        self.kv.set(profile_key(user_id), profile.model_dump(mode="json"))


def profile_from_row(row: Optional[Profile]) -> Optional[UserProfile]:
    """Widen the compact server row into a UserProfile."""
    if row is None:
        return None
    return UserProfile(
        weight=row.weight,
        height=row.height,
        goal=row.goal,
        goal_weight=row.goal_weight,
        bmi=calculate_bmi(row.weight, row.height),
        quiz_completed=bool(row.quiz_completed),
    )


def resolve_profile(remote: Optional[UserProfile], local: Optional[UserProfile]) -> Optional[UserProfile]:
    """Pick the profile the rest of the app should read.

    A server row that went through the quiz wins field by field over the
    stored document; otherwise the document is used as-is.
    """
    if remote is not None and remote.quiz_completed:
        if local is None:
            return remote
        updates = {name: getattr(remote, name) for name in COMPACT_FIELDS
                   if getattr(remote, name) is not None}
        merged = local.model_copy(update=updates)
        bmi = calculate_bmi(merged.weight, merged.height)
        if bmi is not None:
            merged.bmi = bmi
        return merged
    return local if local is not None else remote


def apply_profile_update(db: Session, user_id: int, fields: dict, commit: bool = True) -> Profile:
    """Write non-null compact fields onto the user's profiles row, creating it if needed.

    With commit=False the change is only staged, so the caller can commit it
    together with its own writes.
    """
    row = db.query(Profile).filter(Profile.user_id == user_id).first()
    if row is None:
        row = Profile(user_id=user_id)
        db.add(row)
    for name in COMPACT_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(row, name, value)
    if commit:
        db.commit()
        db.refresh(row)
    return row


def remote_profile_sync(db: Session, user_id: int):
    """Sync callable handed to the quiz engine."""
    def _sync(payload: dict):
        try:
            apply_profile_update(db, user_id, payload)
        except SQLAlchemyError as e:
            db.rollback()
            raise RemoteSyncError(f"Could not update profile row: {e}") from e
    return _sync


def mirror_form_update(store: ProfileStore, user_id: int, fields: dict) -> UserProfile:
    """Copy profile-form edits into the quiz document so both views agree."""
    profile = store.load(user_id) or UserProfile()
    updates = {name: fields[name] for name in ("weight", "height", "goal", "goal_weight")
               if fields.get(name) is not None}
    # Re-validate so legacy goals and float heights are normalized
    profile = UserProfile.model_validate({**profile.model_dump(), **updates})
    profile.bmi = calculate_bmi(profile.weight, profile.height)
    store.save(user_id, profile)
    return profile
