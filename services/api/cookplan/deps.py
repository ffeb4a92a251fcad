"""FastAPI dependencies for the cookplan API.

Provides:
- Reference clock for cook timelines (overridable in tests)
- Meal / recipe lookup with 404s
"""

from datetime import datetime, timezone

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from .db import get_db
from .models import Meal, MealRecipe, Recipe


def get_now() -> datetime:
    """Current instant in UTC.

    The cook timeline only uses this to estimate a serve time for meals
    that have none.
    """
    return datetime.now(timezone.utc)


def get_recipe_or_404(recipe_id: str, db: Session = Depends(get_db)) -> Recipe:
    recipe = db.get(Recipe, recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


def get_meal_or_404(meal_id: str, db: Session = Depends(get_db)) -> Meal:
    meal = (
        db.query(Meal)
        .options(
            selectinload(Meal.recipe_links)
            .selectinload(MealRecipe.recipe)
            .selectinload(Recipe.steps)
        )
        .filter(Meal.id == meal_id)
        .first()
    )
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal
