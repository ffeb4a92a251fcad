"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - List recipes (optional search over title, ingredients, instructions)
- POST /api/recipes - Create recipe; steps extracted from instructions if omitted
- GET /api/recipes/{id} - Get recipe with steps
- PATCH /api/recipes/{id} - Update recipe
- DELETE /api/recipes/{id} - Delete recipe (and its meal links)
"""

import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ..core.text import normalize_multiline
from ..db import get_db
from ..deps import get_recipe_or_404
from ..models import Recipe, RecipeStep
from ..parsing.step_extract import extract_steps
from ..schemas import RecipeCreate, RecipeOut, RecipeListOut, RecipePatch, RecipeStepCreate

router = APIRouter()
logger = logging.getLogger("cookplan.recipes")


def _steps_from_payload(recipe_id: str, steps: list[RecipeStepCreate]) -> list[RecipeStep]:
    return [
        RecipeStep(
            id=str(uuid.uuid4()),
            recipe_id=recipe_id,
            step_index=s.step_index,
            instruction=s.instruction,
            duration_min=s.duration_min,
            active_type=s.active_type,
            can_pause=s.can_pause,
            equipment_used=s.equipment_used,
            temperature_value=s.temperature_value,
            temperature_unit=s.temperature_unit,
        )
        for s in steps
    ]


def _steps_from_instructions(recipe_id: str, instructions_text: str) -> list[RecipeStep]:
    """Persist structured steps derived from the instruction lines."""
    return [
        RecipeStep(
            id=str(uuid.uuid4()),
            recipe_id=recipe_id,
            step_index=s.order,
            instruction=s.instruction,
            duration_min=s.duration_min,
            active_type=s.active_type,
            can_pause=s.can_pause,
            equipment_used=s.equipment_used,
            temperature_value=s.temperature_value,
            temperature_unit=s.temperature_unit,
        )
        for s in extract_steps(instructions_text)
    ]


@router.get("/recipes", response_model=list[RecipeListOut])
def list_recipes(
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    search: Optional[str] = Query(None),
):
    """List recipes, newest first. Search matches title, ingredients or instructions."""
    query = db.query(Recipe)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Recipe.title.ilike(pattern),
                Recipe.ingredients_text.ilike(pattern),
                Recipe.instructions_text.ilike(pattern),
            )
        )

    return (
        query
        .order_by(Recipe.created_at.desc(), Recipe.title)
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.post("/recipes", response_model=RecipeOut, status_code=201)
def create_recipe(
    payload: RecipeCreate,
    db: Session = Depends(get_db),
):
    """Create a new recipe.

    Explicit, non-empty steps win. Otherwise (steps omitted or []) one step
    per instruction line is extracted (duration, equipment, temperature and
    active type from the text).
    """
    recipe = Recipe(
        id=str(uuid.uuid4()),
        title=payload.title,
        source_url=payload.source_url,
        ingredients_text=normalize_multiline(payload.ingredients_text),
        instructions_text=normalize_multiline(payload.instructions_text),
    )

    if payload.steps:
        recipe.steps = _steps_from_payload(recipe.id, payload.steps)
    else:
        recipe.steps = _steps_from_instructions(recipe.id, recipe.instructions_text)

    db.add(recipe)
    db.commit()
    db.refresh(recipe)

    logger.info(f"Created recipe {recipe.id} with {len(recipe.steps)} steps")
    return recipe


@router.get("/recipes/{recipe_id}", response_model=RecipeOut)
def get_recipe(recipe: Recipe = Depends(get_recipe_or_404)):
    """Get a recipe by ID with all steps."""
    return recipe


@router.patch("/recipes/{recipe_id}", response_model=RecipeOut)
def update_recipe(
    payload: RecipePatch,
    recipe: Recipe = Depends(get_recipe_or_404),
    db: Session = Depends(get_db),
):
    """Update a recipe.

    Non-empty steps replace all existing steps. An empty steps list, or a
    change to the instructions, re-extracts steps from the instruction text.
    """
    if payload.title is not None:
        recipe.title = payload.title
    if "source_url" in payload.model_fields_set:
        recipe.source_url = payload.source_url
    if payload.ingredients_text is not None:
        recipe.ingredients_text = normalize_multiline(payload.ingredients_text)

    instructions_changed = False
    if payload.instructions_text is not None:
        new_text = normalize_multiline(payload.instructions_text)
        instructions_changed = new_text != recipe.instructions_text
        recipe.instructions_text = new_text

    if payload.steps:
        recipe.steps = _steps_from_payload(recipe.id, payload.steps)
    elif instructions_changed or payload.steps == []:
        recipe.steps = _steps_from_instructions(recipe.id, recipe.instructions_text)

    db.commit()

    recipe = (
        db.query(Recipe)
        .options(selectinload(Recipe.steps))
        .filter(Recipe.id == recipe.id)
        .first()
    )
    return recipe


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(
    recipe: Recipe = Depends(get_recipe_or_404),
    db: Session = Depends(get_db),
):
    """Delete a recipe. Steps and meal links cascade."""
    recipe_id = recipe.id
    db.delete(recipe)
    db.commit()
    logger.info(f"Deleted recipe {recipe_id}")
    return None
