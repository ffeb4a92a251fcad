"""Pydantic schemas for the cookplan API.

Request/response models for:
- Recipes (with nested structured steps)
- Meals (with linked recipes)

Cook timeline responses use the models in services/cook_timeline.py directly.
"""

from datetime import datetime
from typing import Annotated, Optional, Literal

from pydantic import AfterValidator, BaseModel, Field, StringConstraints

from .core.text import clean_md


def _clean_required(value: str) -> str:
    # Length checks run on the raw text; this catches markup-only input ("****").
    cleaned = clean_md(value)
    if not cleaned:
        raise ValueError("Text is empty after removing formatting.")
    return cleaned


TitleText = Annotated[str, StringConstraints(min_length=1, max_length=200), AfterValidator(_clean_required)]
InstructionText = Annotated[str, StringConstraints(min_length=1), AfterValidator(_clean_required)]


# --- Recipe Step ---

class RecipeStepCreate(BaseModel):
    step_index: int = Field(..., ge=0)
    instruction: InstructionText
    duration_min: Optional[float] = Field(None, ge=0)
    active_type: Literal["active", "passive", "rest"] = "active"
    can_pause: bool = False
    equipment_used: Optional[list[str]] = None
    temperature_value: Optional[int] = None
    temperature_unit: Optional[Literal["F", "C"]] = None


class RecipeStepOut(BaseModel):
    id: str
    step_index: int
    instruction: str
    duration_min: Optional[float]
    active_type: str
    can_pause: bool
    equipment_used: Optional[list[str]]
    temperature_value: Optional[int]
    temperature_unit: Optional[str]

    class Config:
        from_attributes = True


# --- Recipe ---

def _check_source_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("Source URL must be a valid URL.")
    return value


SourceUrl = Annotated[Optional[str], AfterValidator(_check_source_url)]


class RecipeCreate(BaseModel):
    title: TitleText
    source_url: SourceUrl = None
    ingredients_text: str = ""
    instructions_text: str = ""
    steps: Optional[list[RecipeStepCreate]] = None  # Extracted from instructions if omitted

    class Config:
        str_strip_whitespace = True


class RecipePatch(BaseModel):
    title: Optional[TitleText] = None
    source_url: SourceUrl = None
    ingredients_text: Optional[str] = None
    instructions_text: Optional[str] = None
    steps: Optional[list[RecipeStepCreate]] = None  # Replaces all steps if provided

    class Config:
        str_strip_whitespace = True


class RecipeOut(BaseModel):
    id: str
    title: str
    source_url: Optional[str]
    ingredients_text: str
    instructions_text: str
    steps: list[RecipeStepOut] = []
    created_at: datetime

    class Config:
        from_attributes = True


class RecipeListOut(BaseModel):
    """Lighter recipe model for list views (no steps)."""
    id: str
    title: str
    source_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


# --- Meal ---

class MealCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    recipe_ids: list[str] = []
    serve_at: Optional[datetime] = None

    class Config:
        str_strip_whitespace = True


class MealPatch(BaseModel):
    """Partial update. Sending serve_at: null clears the serve time."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    serve_at: Optional[datetime] = None

    class Config:
        str_strip_whitespace = True


class MealAddRecipes(BaseModel):
    recipe_ids: list[str] = Field(..., min_length=1)


class MealOut(BaseModel):
    id: str
    title: str
    serve_at: Optional[datetime]
    recipes: list[RecipeListOut] = []
    created_at: datetime

    class Config:
        from_attributes = True


class MealListOut(BaseModel):
    id: str
    title: str
    serve_at: Optional[datetime]
    recipe_count: int = 0
    created_at: datetime
