"""Pydantic schemas for request/response models."""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date as DateType
from typing import Optional, List, Dict, Any

from selva_app.quiz.steps import (
    Goal, Gender, ActivityLevel, StressLevel, SleepQuality, Hydration,
    Protein, Restriction, Routine, normalize_goal,
)

ORM = {"from_attributes": True}

# --- Profile ---

class UserProfile(BaseModel):
    """Canonical onboarding profile, one per user."""
    goal: Optional[Goal] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    weight: Optional[float] = None
    height: Optional[int] = None
    goal_weight: Optional[float] = None
    bmi: Optional[float] = None
    activity_level: Optional[ActivityLevel] = None
    stress_level: Optional[StressLevel] = None
    sleep_quality: Optional[SleepQuality] = None
    hydration: Optional[Hydration] = None
    current_habits: List[str] = []
    favorite_proteins: List[Protein] = []
    restrictions: List[Restriction] = []
    routine: Optional[Routine] = None
    quiz_completed: bool = False
    completed_at: Optional[datetime] = None

    @field_validator("goal", mode="before")
    @classmethod
    def _legacy_goal(cls, value):
        # Older profile-form goals (lose/gain/maintain) map onto quiz goals
        return normalize_goal(value)

    @field_validator("height", mode="before")
    @classmethod
    def _whole_centimetres(cls, value):
        if isinstance(value, float):
            return int(value)
        return value

class ProfileSummary(BaseModel):
    """Display texts shown on the quiz result screen and profile page."""
    goal_text: str
    physical_data_text: str
    bmi_text: str
    weight_goal_text: str
    activity_text: str
    stress_text: str
    sleep_text: str
    hydration_text: str
    routine_text: str
    proteins_text: str

class ProfileResponse(BaseModel):
    profile: Optional[UserProfile] = None
    summary: Optional[ProfileSummary] = None

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    goal_weight: Optional[float] = None

class PasswordChange(BaseModel):
    current_password: str = ""
    new_password: str = ""

class AccountDelete(BaseModel):
    password: str = ""

# --- Auth ---

class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

class CompactProfile(BaseModel):
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    goal_weight: Optional[float] = None
    quiz_completed: bool = False

    model_config = ORM

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str = "user"
    created_at: Optional[datetime] = None
    profile: Optional[CompactProfile] = None

    model_config = ORM

class TokenResponse(BaseModel):
    message: str
    token: str
    user: UserResponse

# --- Quiz ---

class QuizAnswer(BaseModel):
    """Raw form inputs for the current step."""
    answers: Dict[str, Any] = {}

class QuizOption(BaseModel):
    value: str
    label: str

class QuizStepInfo(BaseModel):
    number: int
    field: str
    kind: str
    title: str
    options: List[QuizOption] = []

class QuizState(BaseModel):
    session_id: str
    current_step: int
    total_steps: int
    progress: float
    finished: bool
    step: Optional[QuizStepInfo] = None
    answers: Dict[str, Any] = {}
    profile: Optional[UserProfile] = None
    summary: Optional[ProfileSummary] = None
    auto_close_seconds: Optional[int] = None

# --- Meals ---

class MealCreate(BaseModel):
    name: str = ""
    type: str = ""
    description: Optional[str] = ""
    photo_url: Optional[str] = ""

class MealResponse(BaseModel):
    id: int
    name: str
    type: str
    description: Optional[str] = ""
    photo_url: Optional[str] = ""
    created_at: Optional[datetime] = None

    model_config = ORM

class MealStats(BaseModel):
    total_meals: int
    meals_by_type: Dict[str, int]
    streak: int

# --- Progress ---

class ProgressCreate(BaseModel):
    weight: Optional[float] = None
    date: Optional[DateType] = None
    notes: Optional[str] = ""

class ProgressResponse(BaseModel):
    id: int
    weight: float
    date: DateType
    notes: Optional[str] = ""
    created_at: Optional[datetime] = None

    model_config = ORM

class ProgressSummaryResponse(BaseModel):
    start_weight: Optional[float] = None
    current_weight: Optional[float] = None
    goal_weight: Optional[float] = None
    total_lost: Optional[float] = None
    remaining_to_goal: Optional[float] = None
    progress_percentage: Optional[int] = None

class HistoryItemResponse(BaseModel):
    id: Optional[int] = None
    weight: float
    date: DateType
    notes: Optional[str] = ""
    change: float
    trend: str

class ChartPointResponse(BaseModel):
    x: float
    y: float
    weight: float
    date: DateType

class ChartGridLine(BaseModel):
    y: float
    label: str

class ChartResponse(BaseModel):
    width: int
    height: int
    padding: int
    points: List[ChartPointResponse] = []
    grid: List[ChartGridLine] = []
    empty: bool = True

# --- Recipes ---

class Recipe(BaseModel):
    name: str
    time: str = ""
    calories: str = ""
    protein: str = ""
    ingredients: List[str] = []
    steps: List[str] = []
    tip: str = ""
    meal_type: Optional[str] = None

class RecipeGenerateRequest(BaseModel):
    ingredients: str = ""
    image_base64: Optional[str] = None
    meal_type: str = "any"
    cook_time: str = "any"

class RecipeGenerateResponse(BaseModel):
    recipe: Recipe
    source: str = Field(description="'ai' or 'fallback'")
    message: str
    preferences: str = ""

class ImageAnalysisRequest(BaseModel):
    image_base64: str = ""

class ImageAnalysisResponse(BaseModel):
    ingredients: str

class SaveRecipeRequest(BaseModel):
    recipe: Optional[Dict[str, Any]] = None

class SavedRecipeResponse(Recipe):
    id: int
    saved_at: Optional[datetime] = None

class RecipeSuggestion(BaseModel):
    name: str
    type: str
    icon: str

# --- Admin ---

class AdminUser(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    profile: CompactProfile

class RoleUpdate(BaseModel):
    role: str = ""

class AdminStats(BaseModel):
    total_users: int
    total_meals: int
    total_recipes: int
    new_users_today: int
