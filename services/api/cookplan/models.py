"""SQLAlchemy ORM models for cookplan.

Tables:
- recipes: Recipe text (ingredients/instructions) plus source URL
- recipe_steps: Structured, ordered cooking steps for a recipe
- meals: A set of recipes cooked together, with an optional serve time
- meal_recipes: Meal <-> recipe links
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Text,
    Integer,
    Float,
    Boolean,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func, false
from sqlalchemy.types import JSON

from .db import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Recipe(Base):
    """Recipe as entered or imported by the user."""
    __tablename__ = "recipes"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    source_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    ingredients_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    instructions_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    steps: Mapped[list["RecipeStep"]] = relationship(
        "RecipeStep", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeStep.step_index"
    )
    meal_links: Mapped[list["MealRecipe"]] = relationship(
        "MealRecipe", back_populates="recipe", cascade="all, delete-orphan"
    )


class RecipeStep(Base):
    """Ordered cooking step within a recipe.

    duration_min NULL means "unknown"; the cook timeline fills in a default.
    """
    __tablename__ = "recipe_steps"
    __table_args__ = (
        Index("ix_recipe_steps_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    step_index: Mapped[int] = mapped_column(Integer, nullable=False)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    duration_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    active_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active"
    )  # active | passive | rest
    can_pause: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    equipment_used: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    temperature_value: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    temperature_unit: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)  # F | C

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="steps")


class Meal(Base):
    """A meal groups recipes that are served together."""
    __tablename__ = "meals"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    serve_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    recipe_links: Mapped[list["MealRecipe"]] = relationship(
        "MealRecipe", back_populates="meal", cascade="all, delete-orphan",
        order_by="MealRecipe.created_at"
    )

    @property
    def recipes(self) -> list["Recipe"]:
        return [link.recipe for link in self.recipe_links]


class MealRecipe(Base):
    __tablename__ = "meal_recipes"
    __table_args__ = (
        UniqueConstraint("meal_id", "recipe_id", name="uq_meal_recipe"),
        Index("ix_meal_recipes_meal_id", "meal_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=generate_uuid
    )
    meal_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("meals.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    meal: Mapped["Meal"] = relationship("Meal", back_populates="recipe_links")
    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="meal_links")
