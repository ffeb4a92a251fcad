import re
import logging
from typing import Optional, Tuple, List

from ..core.text import split_lines
from ..services.cook_timeline import RecipeForTimeline, StepForTimeline

logger = logging.getLogger("cookplan.parsing")

# Hours win over minutes: "1 hour 30 min" -> 60
HOUR_REGEX = re.compile(r'(\d+)\s*(hours|hour|hr)\b')
MINUTE_REGEX = re.compile(r'(\d+)\s*(minutes|minute|min)\b')

# "400°F", "180 C", "350F"
TEMPERATURE_REGEX = re.compile(r'(\d{2,4})\s*°?\s*([FC])\b', re.IGNORECASE)

EQUIPMENT_PATTERNS = [
    ("oven", re.compile(r'\boven\b')),
    ("pan", re.compile(r'\bskillet\b|\bpan\b')),
    ("stove", re.compile(r'\bpot\b|\bboil\b|\bsimmer\b')),
    ("grill", re.compile(r'\bgrill\b')),
]

REST_REGEX = re.compile(r'\brest\b|\blet sit\b')
PASSIVE_REGEX = re.compile(r'\bbake\b|\broast\b|\bsimmer\b|\bboil\b|\bbring to a boil\b|\bpreheat\b')

PLACEHOLDER_INSTRUCTION = "Cook and serve."


def parse_duration_min(text: str) -> Optional[int]:
    lower = text.lower()
    hour_match = HOUR_REGEX.search(lower)
    if hour_match:
        return int(hour_match.group(1)) * 60
    min_match = MINUTE_REGEX.search(lower)
    if min_match:
        return int(min_match.group(1))
    return None


def parse_temperature(text: str) -> Tuple[Optional[int], Optional[str]]:
    match = TEMPERATURE_REGEX.search(text)
    if not match:
        return None, None
    return int(match.group(1)), match.group(2).upper()


def detect_equipment(text: str) -> Optional[List[str]]:
    lower = text.lower()
    equipment = [name for name, pattern in EQUIPMENT_PATTERNS if pattern.search(lower)]
    return equipment or None


def detect_active_type(text: str) -> str:
    lower = text.lower()
    if REST_REGEX.search(lower):
        return "rest"
    if PASSIVE_REGEX.search(lower):
        return "passive"
    return "active"


def extract_steps(instructions_text: str, id_prefix: str = "step") -> List[StepForTimeline]:
    """
    Turn free-text instructions (one step per line) into structured steps.
    Order is 1-based and follows the line order.
    """
    steps = []
    for index, instruction in enumerate(split_lines(instructions_text)):
        active_type = detect_active_type(instruction)
        temp_value, temp_unit = parse_temperature(instruction)
        steps.append(StepForTimeline(
            id=f"{id_prefix}-{index + 1}",
            order=index + 1,
            instruction=instruction,
            duration_min=parse_duration_min(instruction),
            active_type=active_type,
            can_pause=active_type != "active",
            equipment_used=detect_equipment(instruction),
            temperature_value=temp_value,
            temperature_unit=temp_unit,
        ))
    return steps


def placeholder_step(id_prefix: str = "step") -> StepForTimeline:
    return StepForTimeline(
        id=f"{id_prefix}-1",
        order=1,
        instruction=PLACEHOLDER_INSTRUCTION,
        duration_min=None,
        active_type="active",
        can_pause=False,
    )


def to_timeline_recipe(recipe) -> RecipeForTimeline:
    """
    Build the scheduler input for a persisted recipe.

    Stored steps are used as-is; otherwise steps are extracted from the
    instruction text. A recipe that yields nothing gets a single placeholder
    step so it still shows up on the timeline.
    """
    if recipe.steps:
        steps = [
            StepForTimeline(
                id=step.id,
                order=step.step_index,
                instruction=step.instruction,
                duration_min=step.duration_min,
                active_type=step.active_type,
                can_pause=step.can_pause,
                equipment_used=step.equipment_used,
                temperature_value=step.temperature_value,
                temperature_unit=step.temperature_unit,
            )
            for step in recipe.steps
        ]
    else:
        steps = extract_steps(recipe.instructions_text or "", id_prefix=f"{recipe.id}-step")

    if not steps:
        logger.debug(f"Recipe {recipe.id} has no steps, using placeholder")
        steps = [placeholder_step(id_prefix=f"{recipe.id}-step")]

    return RecipeForTimeline(id=recipe.id, title=recipe.title, steps=steps)
