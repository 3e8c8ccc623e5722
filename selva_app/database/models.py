"""SQLAlchemy models for the Protocolo Selva application."""
import json
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Date, Text, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime

Base = declarative_base()

class User(Base):
    """Account data; the onboarding profile lives in Profile and kv_entries."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    # bcrypt hash, never the raw password
    password = Column(String, nullable=False)
    role = Column(String, default="user", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    meals = relationship("Meal", back_populates="user", cascade="all, delete-orphan")
    recipes = relationship("SavedRecipe", back_populates="user", cascade="all, delete-orphan")
    progress_entries = relationship("ProgressEntry", back_populates="user", cascade="all, delete-orphan")

class Profile(Base):
    """Compact server-side profile updated by the profile form and quiz sync."""
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), unique=True, nullable=False)
    weight = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    # Either a quiz goal (lose_weight, ...) or a legacy form goal (lose, gain, maintain)
    goal = Column(String, default="lose")
    goal_weight = Column(Float, nullable=True)
    quiz_completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")

class Meal(Base):
    """A logged meal."""
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    # breakfast, lunch, dinner or snack
    type = Column(String, nullable=False)
    description = Column(Text, default="")
    photo_url = Column(String, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="meals")

class SavedRecipe(Base):
    """Recipe saved by a user; names are unique per user."""
    __tablename__ = "recipes"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_recipes_user_name"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    time = Column(String, default="")
    calories = Column(String, default="")
    protein = Column(String, default="")
    # JSON-encoded lists
    ingredients = Column(Text, default="[]")
    steps = Column(Text, default="[]")
    tip = Column(Text, default="")
    meal_type = Column(String, nullable=True)
    saved_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="recipes")

    def to_recipe_dict(self) -> dict:
        return {
            "name": self.name,
            "time": self.time or "",
            "calories": self.calories or "",
            "protein": self.protein or "",
            "ingredients": json.loads(self.ingredients or "[]"),
            "steps": json.loads(self.steps or "[]"),
            "tip": self.tip or "",
            "meal_type": self.meal_type,
        }

class ProgressEntry(Base):
    """A body-weight measurement."""
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    weight = Column(Float, nullable=False)
    date = Column(Date, nullable=False)
    notes = Column(Text, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="progress_entries")

class KeyValueEntry(Base):
    """JSON documents keyed by string; backs the quiz profile store."""
    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
