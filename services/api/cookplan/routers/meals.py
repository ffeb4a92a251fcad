"""Meals API router.

Endpoints:
- GET /api/meals - List meals
- POST /api/meals - Create meal (optionally with recipes and a serve time)
- GET /api/meals/{id} - Get meal with its recipes
- PATCH /api/meals/{id} - Rename / set or clear serve time
- POST /api/meals/{id}/recipes - Link more recipes
- DELETE /api/meals/{id}/recipes/{recipe_id} - Unlink a recipe
- DELETE /api/meals/{id} - Delete meal
- GET /api/meals/{id}/cook-timeline - Backward-scheduled cook timeline
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_meal_or_404, get_now
from ..models import Meal, MealRecipe, Recipe
from ..parsing.step_extract import to_timeline_recipe
from ..schemas import MealAddRecipes, MealCreate, MealListOut, MealOut, MealPatch
from ..services.cook_timeline import (
    MealForTimeline,
    TimelineInput,
    TimelineResult,
    build_cook_timeline,
)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)
logger = logging.getLogger("cookplan.meals")


def _as_utc(value: datetime | None) -> datetime | None:
    # Naive values are UTC (SQLite drops tzinfo on the way back).
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _meal_to_out(meal: Meal) -> MealOut:
    return MealOut(
        id=meal.id,
        title=meal.title,
        serve_at=_as_utc(meal.serve_at),
        recipes=meal.recipes,
        created_at=meal.created_at,
    )


def _load_recipes(db: Session, recipe_ids: list[str]) -> list[Recipe]:
    """Fetch recipes by id, 404 if any is unknown. Duplicates are dropped."""
    unique_ids = list(dict.fromkeys(recipe_ids))
    if not unique_ids:
        return []
    recipes = db.query(Recipe).filter(Recipe.id.in_(unique_ids)).all()
    found = {r.id for r in recipes}
    missing = [rid for rid in unique_ids if rid not in found]
    if missing:
        raise HTTPException(status_code=404, detail=f"Recipe(s) not found: {', '.join(missing)}")
    by_id = {r.id: r for r in recipes}
    return [by_id[rid] for rid in unique_ids]


@router.get("/meals", response_model=list[MealListOut])
def list_meals(db: Session = Depends(get_db)):
    """List meals, newest first, with their recipe counts."""
    rows = (
        db.query(Meal, func.count(MealRecipe.id))
        .outerjoin(MealRecipe, MealRecipe.meal_id == Meal.id)
        .group_by(Meal.id)
        .order_by(Meal.created_at.desc(), Meal.title)
        .all()
    )
    return [
        MealListOut(
            id=meal.id,
            title=meal.title,
            serve_at=_as_utc(meal.serve_at),
            recipe_count=count,
            created_at=meal.created_at,
        )
        for meal, count in rows
    ]


@router.post("/meals", response_model=MealOut, status_code=201)
def create_meal(payload: MealCreate, db: Session = Depends(get_db)):
    recipes = _load_recipes(db, payload.recipe_ids)

    meal = Meal(title=payload.title, serve_at=_as_utc(payload.serve_at))
    meal.recipe_links = [MealRecipe(recipe=r) for r in recipes]
    db.add(meal)
    db.commit()
    db.refresh(meal)

    logger.info(f"Created meal {meal.id} with {len(recipes)} recipes")
    return _meal_to_out(meal)


@router.get("/meals/{meal_id}", response_model=MealOut)
def get_meal(meal: Meal = Depends(get_meal_or_404)):
    return _meal_to_out(meal)


@router.patch("/meals/{meal_id}", response_model=MealOut)
def update_meal(
    payload: MealPatch,
    meal: Meal = Depends(get_meal_or_404),
    db: Session = Depends(get_db),
):
    """Rename a meal and/or set its serve time. serve_at: null clears it."""
    if payload.title is not None:
        meal.title = payload.title
    if "serve_at" in payload.model_fields_set:
        meal.serve_at = _as_utc(payload.serve_at)

    db.commit()
    db.refresh(meal)
    return _meal_to_out(meal)


@router.post("/meals/{meal_id}/recipes", response_model=MealOut)
def add_recipes_to_meal(
    payload: MealAddRecipes,
    meal: Meal = Depends(get_meal_or_404),
    db: Session = Depends(get_db),
):
    """Link recipes to a meal. Recipes already in the meal are skipped."""
    recipes = _load_recipes(db, payload.recipe_ids)
    existing = {link.recipe_id for link in meal.recipe_links}
    new_recipes = [r for r in recipes if r.id not in existing]

    if new_recipes:
        for recipe in new_recipes:
            meal.recipe_links.append(MealRecipe(recipe=recipe))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=400, detail="Could not add recipes to meal")
        db.refresh(meal)

    logger.info(f"Added {len(new_recipes)} recipes to meal {meal.id}")
    return _meal_to_out(meal)


@router.delete("/meals/{meal_id}/recipes/{recipe_id}", response_model=MealOut)
def remove_recipe_from_meal(
    recipe_id: str,
    meal: Meal = Depends(get_meal_or_404),
    db: Session = Depends(get_db),
):
    """Unlink a recipe from a meal. Unlinking a recipe that is not there is a no-op."""
    meal.recipe_links = [link for link in meal.recipe_links if link.recipe_id != recipe_id]
    db.commit()
    db.refresh(meal)
    return _meal_to_out(meal)


@router.delete("/meals/{meal_id}", status_code=204)
def delete_meal(
    meal: Meal = Depends(get_meal_or_404),
    db: Session = Depends(get_db),
):
    meal_id = meal.id
    db.delete(meal)
    db.commit()
    logger.info(f"Deleted meal {meal_id}")
    return None


@router.get("/meals/{meal_id}/cook-timeline", response_model=TimelineResult)
@limiter.limit("60/minute")
def get_cook_timeline(
    request: Request,
    meal: Meal = Depends(get_meal_or_404),
    now: datetime = Depends(get_now),
):
    """Schedule every recipe in the meal backward from the serve time.

    Meals without a serve time are scheduled as if served 90 minutes from now.
    """
    timeline_input = TimelineInput(
        meal=MealForTimeline(id=meal.id, title=meal.title, serve_at=_as_utc(meal.serve_at)),
        recipes=[to_timeline_recipe(r) for r in meal.recipes],
        now=now,
    )
    return build_cook_timeline(timeline_input)
