"""Dev-only endpoints for seeding.

Endpoints:
- POST /api/dev/seed - Create sample recipes + one sample meal
"""

import uuid
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Meal, MealRecipe, Recipe
from .recipes import _steps_from_instructions

router = APIRouter()
logger = logging.getLogger("cookplan.dev")


class SeedResponse(BaseModel):
    recipes_created: int
    meals_created: int
    message: str


SEED_MEAL_TITLE = "Easy Weeknight Set"

SEED_RECIPES = [
    {
        "title": "Lemon Herb Couscous",
        "source_url": "https://example.com/lemon-herb-couscous",
        "ingredients": [
            "1 cup couscous",
            "1 cup vegetable broth",
            "1 lemon, zested and juiced",
            "2 tbsp olive oil",
            "1/2 cup chopped parsley",
            "Salt and pepper to taste",
        ],
        "instructions": [
            "Bring broth to a simmer and pour over couscous.",
            "Cover and let sit for 5 minutes, then fluff with a fork.",
            "Stir in lemon zest, lemon juice, olive oil, and parsley.",
            "Season with salt and pepper.",
        ],
    },
    {
        "title": "Crispy Chili Chickpeas",
        "source_url": "https://example.com/crispy-chili-chickpeas",
        "ingredients": [
            "1 can chickpeas, rinsed and dried",
            "1 tbsp olive oil",
            "1 tsp smoked paprika",
            "1/2 tsp chili flakes",
            "1/2 tsp garlic powder",
            "Salt to taste",
        ],
        "instructions": [
            "Preheat oven to 400°F.",
            "Toss chickpeas with olive oil and spices.",
            "Spread on a baking sheet and roast for 25 minutes.",
            "Cool slightly for extra crunch.",
        ],
    },
    {
        "title": "Berry Breakfast Parfait",
        "source_url": "https://example.com/berry-parfait",
        "ingredients": [
            "1 cup Greek yogurt",
            "1/2 cup granola",
            "1/2 cup mixed berries",
            "1 tbsp honey",
        ],
        "instructions": [
            "Layer yogurt, granola, and berries in a glass.",
            "Drizzle with honey.",
            "Serve immediately.",
        ],
    },
]


@router.post("/dev/seed", response_model=SeedResponse)
def seed_dev_data(db: Session = Depends(get_db)):
    """Create sample recipes and a meal using the first two.

    Idempotent: recipes are matched by title, the meal by its title.
    """
    created_count = 0
    seeded: list[Recipe] = []

    for recipe_data in SEED_RECIPES:
        recipe = db.query(Recipe).filter(Recipe.title == recipe_data["title"]).first()
        if not recipe:
            recipe = Recipe(
                id=str(uuid.uuid4()),
                title=recipe_data["title"],
                source_url=recipe_data["source_url"],
                ingredients_text="\n".join(recipe_data["ingredients"]),
                instructions_text="\n".join(recipe_data["instructions"]),
            )
            recipe.steps = _steps_from_instructions(recipe.id, recipe.instructions_text)
            db.add(recipe)
            created_count += 1
        seeded.append(recipe)

    meals_created = 0
    if not db.query(Meal).filter(Meal.title == SEED_MEAL_TITLE).first():
        meal = Meal(title=SEED_MEAL_TITLE)
        meal.recipe_links = [MealRecipe(recipe=r) for r in seeded[:2]]
        db.add(meal)
        meals_created = 1

    db.commit()
    logger.info(f"Seeded {created_count} recipes, {meals_created} meals")

    return SeedResponse(
        recipes_created=created_count,
        meals_created=meals_created,
        message=f"Created {created_count} new recipes and {meals_created} new meals.",
    )
