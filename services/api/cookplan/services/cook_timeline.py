"""Cook timeline scheduler.

Builds a single backward-scheduled timeline for a meal:
- every recipe's last step ends exactly at the serve time
- steps from all recipes are bucketed by their rounded offset from the
  earliest step, so the cook can follow one list
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger("cookplan.timeline")

ActiveType = Literal["active", "passive", "rest"]
TemperatureUnit = Literal["F", "C"]

# Lead time used when a meal has no serve time yet
DEFAULT_SERVE_LEAD_MIN = 90

DEFAULT_DURATIONS_MIN: dict[str, int] = {
    "active": 2,
    "passive": 5,
    "rest": 5,
}


# --- Inputs ---

class StepForTimeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    order: int
    instruction: str
    duration_min: Optional[float] = None
    active_type: ActiveType = "active"
    can_pause: bool = False
    equipment_used: Optional[list[str]] = None
    temperature_value: Optional[int] = None
    temperature_unit: Optional[TemperatureUnit] = None


class RecipeForTimeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    steps: list[StepForTimeline] = []


class MealForTimeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    serve_at: Optional[datetime] = None


class TimelineInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    meal: MealForTimeline
    recipes: list[RecipeForTimeline] = []
    now: datetime


# --- Outputs ---

class ScheduledStep(BaseModel):
    id: str  # "<recipe_id>:<step_id>"
    recipe_id: str
    recipe_title: str
    step_id: str
    order: int
    instruction: str
    active_type: ActiveType
    can_pause: bool
    equipment_used: Optional[list[str]]
    temperature_value: Optional[int]
    temperature_unit: Optional[TemperatureUnit]
    duration_min: float
    is_estimated_duration: bool
    start_time: datetime
    end_time: datetime
    t_minus_min: int
    start_offset_min: int = 0


class TimelineGroup(BaseModel):
    start_offset_min: int
    label: str
    steps: list[ScheduledStep]


class TimelineResult(BaseModel):
    serve_at: datetime
    serve_at_is_estimated: bool
    estimated_serve_at_reason: Optional[Literal["unset"]] = None
    estimated_serve_in_min: Optional[int] = None
    total_duration_min: int = 0
    steps: list[ScheduledStep]
    groups: list[TimelineGroup]


# --- Policy helpers ---

def default_duration_min(active_type: str) -> int:
    return DEFAULT_DURATIONS_MIN[active_type]


def round_to_nearest_5(value_min: float) -> int:
    """Round to the nearest multiple of 5, ties toward +infinity.

    Python's round() uses banker's rounding, so the half-up rule is spelled
    out with floor.
    """
    return int(math.floor(value_min / 5 + 0.5)) * 5


def minutes_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 60


def resolve_serve_at(
    serve_at: Optional[datetime], now: datetime
) -> tuple[datetime, bool, Optional[int]]:
    """Return (serve_at, is_estimated, estimated_serve_in_min)."""
    if serve_at is not None:
        return serve_at, False, None
    return now + timedelta(minutes=DEFAULT_SERVE_LEAD_MIN), True, DEFAULT_SERVE_LEAD_MIN


def resolve_duration(step: StepForTimeline) -> tuple[float, bool]:
    """Return (duration_min, is_estimated)."""
    if step.duration_min is not None:
        return step.duration_min, False
    return default_duration_min(step.active_type), True


# --- Scheduling ---

def schedule_recipe(recipe: RecipeForTimeline, serve_at: datetime) -> list[ScheduledStep]:
    """Walk one recipe's steps last-to-first from the serve time.

    Each step ends where the following one starts, so the highest-order
    step ends exactly at serve_at. Steps are emitted in walk order
    (last step first); offsets from the timeline baseline are filled in
    later by group_steps.
    """
    ordered = sorted(recipe.steps, key=lambda s: s.order)
    cursor = serve_at
    scheduled = []

    for step in reversed(ordered):
        duration_min, is_estimated = resolve_duration(step)
        end_time = cursor
        start_time = end_time - timedelta(minutes=duration_min)
        t_minus = max(0, round_to_nearest_5(minutes_between(start_time, serve_at)))

        scheduled.append(ScheduledStep(
            id=f"{recipe.id}:{step.id}",
            recipe_id=recipe.id,
            recipe_title=recipe.title,
            step_id=step.id,
            order=step.order,
            instruction=step.instruction,
            active_type=step.active_type,
            can_pause=step.can_pause,
            equipment_used=list(step.equipment_used) if step.equipment_used is not None else None,
            temperature_value=step.temperature_value,
            temperature_unit=step.temperature_unit,
            duration_min=duration_min,
            is_estimated_duration=is_estimated,
            start_time=start_time,
            end_time=end_time,
            t_minus_min=t_minus,
        ))
        cursor = start_time

    return scheduled


def group_steps(
    steps: list[ScheduledStep], serve_at: datetime
) -> tuple[list[ScheduledStep], list[TimelineGroup]]:
    """Assign start offsets relative to the earliest step and bucket by offset.

    Returns the flat list sorted by start time and the groups sorted by
    offset. With no steps the baseline is serve_at and there are no groups.
    """
    ordered = sorted(steps, key=lambda s: s.start_time)
    baseline = ordered[0].start_time if ordered else serve_at

    with_offsets = [
        s.model_copy(update={
            "start_offset_min": max(0, round_to_nearest_5(minutes_between(baseline, s.start_time)))
        })
        for s in ordered
    ]

    buckets: dict[int, list[ScheduledStep]] = {}
    for step in with_offsets:
        buckets.setdefault(step.start_offset_min, []).append(step)

    groups = [
        TimelineGroup(
            start_offset_min=offset,
            label=f"{offset} min",
            steps=sorted(buckets[offset], key=lambda s: s.start_time),
        )
        for offset in sorted(buckets)
    ]
    return with_offsets, groups


def total_duration_min(steps: list[ScheduledStep]) -> int:
    if not steps:
        return 0
    earliest = min(s.start_time for s in steps)
    latest = max(s.end_time for s in steps)
    return round_to_nearest_5(minutes_between(earliest, latest))


def build_cook_timeline(data: TimelineInput) -> TimelineResult:
    """Schedule every recipe of a meal backward from its serve time."""
    serve_at, serve_at_is_estimated, estimated_in = resolve_serve_at(
        data.meal.serve_at, data.now
    )
    if serve_at_is_estimated:
        logger.info(
            f"Meal {data.meal.id} has no serve time, estimating {estimated_in} min from now"
        )

    scheduled: list[ScheduledStep] = []
    for recipe in data.recipes:
        scheduled.extend(schedule_recipe(recipe, serve_at))

    steps, groups = group_steps(scheduled, serve_at)
    logger.debug(
        f"Built timeline for meal {data.meal.id}: "
        f"{len(data.recipes)} recipes, {len(steps)} steps, {len(groups)} groups"
    )

    return TimelineResult(
        serve_at=serve_at,
        serve_at_is_estimated=serve_at_is_estimated,
        estimated_serve_at_reason="unset" if serve_at_is_estimated else None,
        estimated_serve_in_min=estimated_in,
        total_duration_min=total_duration_min(steps),
        steps=steps,
        groups=groups,
    )
