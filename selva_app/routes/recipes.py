"""Recipe generation, image analysis and saved recipes."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from typing import List

from ..core.errors import DuplicateRecipeError, GenerationError
from ..core.logger import setup_logger
from ..core.security import get_current_user
from ..database.models import User
from ..database.session import get_db
from ..recipes.fallback import pick_fallback_recipe
from ..recipes.preferences import compile_preferences
from ..recipes.suggestions import suggestions_for
from .profile import load_resolved_profile
from ..schemas.schemas import (
    ImageAnalysisRequest, ImageAnalysisResponse, Recipe, RecipeGenerateRequest,
    RecipeGenerateResponse, RecipeSuggestion, SaveRecipeRequest, SavedRecipeResponse,
)
from ..services import recipe_book
from ..services.ai import RecipeAI, get_recipe_ai

router = APIRouter()
logger = setup_logger(__name__)


def _combine_ingredients(text: str, recognized: str) -> str:
    text = (text or "").strip()
    if text and recognized:
        return f"{text}, {recognized}"
    return text or recognized


def _saved_response(row) -> SavedRecipeResponse:
    return SavedRecipeResponse(id=row.id, saved_at=row.saved_at, **row.to_recipe_dict())


@router.post("/generate", response_model=RecipeGenerateResponse)
def generate_recipe(payload: RecipeGenerateRequest, user: User = Depends(get_current_user),
                    db: Session = Depends(get_db), ai: RecipeAI = Depends(get_recipe_ai)):
    """Generate a recipe for the user; falls back to a static recipe on any AI failure."""
    ingredients = payload.ingredients
    if payload.image_base64:
        try:
            ingredients = _combine_ingredients(ingredients, ai.analyze_image(payload.image_base64))
        except GenerationError as e:
            # Photo is optional; keep the typed ingredients
            logger.info(f"Image analysis skipped for user {user.id}: {e}")

    profile = load_resolved_profile(db, user)
    preferences = compile_preferences(profile, payload.meal_type, payload.cook_time)

    try:
        recipe = ai.generate_recipe(ingredients, preferences)
    except GenerationError as e:
        logger.warning(f"Recipe generation failed for user {user.id}, serving fallback: {e}")
        return RecipeGenerateResponse(
            recipe=pick_fallback_recipe(),
            source="fallback",
            message="Receita sugerida para este horário! 🍳",
            preferences=preferences,
        )
    return RecipeGenerateResponse(
        recipe=recipe,
        source="ai",
        message="Receita gerada com sucesso! 🍳",
        preferences=preferences,
    )


@router.post("/analyze-image", response_model=ImageAnalysisResponse)
def analyze_image(payload: ImageAnalysisRequest, user: User = Depends(get_current_user),
                  ai: RecipeAI = Depends(get_recipe_ai)):
    if not payload.image_base64:
        raise HTTPException(status_code=400, detail="Imagem não fornecida")
    if not ai.available:
        raise HTTPException(status_code=503, detail="Serviço de IA não configurado.")
    try:
        ingredients = ai.analyze_image(payload.image_base64)
    except GenerationError as e:
        logger.warning(f"Image analysis failed for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Erro ao analisar imagem")
    return ImageAnalysisResponse(ingredients=ingredients)


@router.get("/suggestions", response_model=List[RecipeSuggestion])
def get_suggestions(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    profile = load_resolved_profile(db, user)
    return suggestions_for(profile.goal if profile else None)


@router.post("/save", response_model=SavedRecipeResponse, status_code=201)
def save_recipe(payload: SaveRecipeRequest, user: User = Depends(get_current_user),
                db: Session = Depends(get_db)):
    if not payload.recipe or not payload.recipe.get("name"):
        raise HTTPException(status_code=400, detail="Dados da receita inválidos")
    try:
        recipe = Recipe.model_validate(payload.recipe)
    except PydanticValidationError:
        raise HTTPException(status_code=400, detail="Dados da receita inválidos")

    try:
        row = recipe_book.save_recipe(db, user.id, recipe)
    except DuplicateRecipeError:
        raise HTTPException(status_code=409, detail="Receita já está salva")
    return _saved_response(row)


@router.get("", response_model=List[SavedRecipeResponse])
def list_recipes(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_saved_response(row) for row in recipe_book.list_recipes(db, user.id)]


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not recipe_book.delete_recipe(db, user.id, recipe_id):
        raise HTTPException(status_code=404, detail="Receita não encontrada")
    return {"message": "Receita removida"}
