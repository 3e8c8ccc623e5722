"""Saved recipes of a user."""
import json
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from selva_app.core.errors import DuplicateRecipeError
from selva_app.database.models import SavedRecipe
from selva_app.schemas.schemas import Recipe


def save_recipe(db: Session, user_id: int, recipe: Recipe) -> SavedRecipe:
    """Store a recipe; names are unique per user."""
    existing = db.query(SavedRecipe).filter(
        SavedRecipe.user_id == user_id, SavedRecipe.name == recipe.name
    ).first()
    if existing:
        raise DuplicateRecipeError(recipe.name)

    row = SavedRecipe(
        user_id=user_id,
        name=recipe.name,
        time=recipe.time,
        calories=recipe.calories,
        protein=recipe.protein,
        ingredients=json.dumps(recipe.ingredients, ensure_ascii=False),
        steps=json.dumps(recipe.steps, ensure_ascii=False),
        tip=recipe.tip,
        meal_type=recipe.meal_type,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent save of the same name
        db.rollback()
        raise DuplicateRecipeError(recipe.name) from e
    except Exception:
        db.rollback()
        raise
    db.refresh(row)
    return row


def list_recipes(db: Session, user_id: int) -> List[SavedRecipe]:
    return (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user_id)
        .order_by(SavedRecipe.saved_at.desc(), SavedRecipe.id.desc())
        .all()
    )


def delete_recipe(db: Session, user_id: int, recipe_id: int) -> bool:
    deleted = db.query(SavedRecipe).filter(
        SavedRecipe.id == recipe_id, SavedRecipe.user_id == user_id
    ).delete()
    db.commit()
    return deleted > 0
