"""Initial schema with recipes, recipe_steps, meals, meal_recipes

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Recipes table
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("source_url", sa.String(2000), nullable=True),
        sa.Column("ingredients_text", sa.Text, nullable=False),
        sa.Column("instructions_text", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Recipe steps table
    op.create_table(
        "recipe_steps",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("recipe_id", sa.String(36), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("step_index", sa.Integer, nullable=False),
        sa.Column("instruction", sa.Text, nullable=False),
        sa.Column("duration_min", sa.Float, nullable=True),
        sa.Column("active_type", sa.String(20), nullable=False),
        sa.Column("can_pause", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("equipment_used", sa.JSON, nullable=True),
        sa.Column("temperature_value", sa.Integer, nullable=True),
        sa.Column("temperature_unit", sa.String(1), nullable=True),
    )
    op.create_index("ix_recipe_steps_recipe_id", "recipe_steps", ["recipe_id"])

    # Meals table
    op.create_table(
        "meals",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("serve_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Meal <-> recipe links
    op.create_table(
        "meal_recipes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("meal_id", sa.String(36), sa.ForeignKey("meals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("recipe_id", sa.String(36), sa.ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("meal_id", "recipe_id", name="uq_meal_recipe"),
    )
    op.create_index("ix_meal_recipes_meal_id", "meal_recipes", ["meal_id"])


def downgrade() -> None:
    op.drop_index("ix_meal_recipes_meal_id", table_name="meal_recipes")
    op.drop_table("meal_recipes")
    op.drop_table("meals")
    op.drop_index("ix_recipe_steps_recipe_id", table_name="recipe_steps")
    op.drop_table("recipe_steps")
    op.drop_table("recipes")
