import pytest

from cookplan.core.text import clean_md, normalize_multiline, split_lines
from cookplan.parsing.step_extract import (
    PLACEHOLDER_INSTRUCTION,
    detect_active_type,
    detect_equipment,
    extract_steps,
    parse_duration_min,
    parse_temperature,
    to_timeline_recipe,
)


class MockStep:
    def __init__(self, id, step_index, instruction, duration_min=None, active_type="active",
                 can_pause=False, equipment_used=None, temperature_value=None, temperature_unit=None):
        self.id = id
        self.step_index = step_index
        self.instruction = instruction
        self.duration_min = duration_min
        self.active_type = active_type
        self.can_pause = can_pause
        self.equipment_used = equipment_used
        self.temperature_value = temperature_value
        self.temperature_unit = temperature_unit


class MockRecipe:
    def __init__(self, id, title, instructions_text="", steps=None):
        self.id = id
        self.title = title
        self.instructions_text = instructions_text
        self.steps = steps or []


@pytest.mark.parametrize("text,expected", [
    ("Roast for 25 minutes.", 25),
    ("Simmer 10 min", 10),
    ("Let rise 2 hours", 120),
    ("Bake 1 hr 30 minutes", 60),  # hours win
    ("Cook for 1 minute", 1),
    ("Season with salt.", None),
    ("Use 2 minced shallots", None),
])
def test_parse_duration_min(text, expected):
    assert parse_duration_min(text) == expected


@pytest.mark.parametrize("text,expected", [
    ("Preheat oven to 400°F.", (400, "F")),
    ("Heat to 180 c", (180, "C")),
    ("Bake at 350F until golden", (350, "F")),
    ("Add 2 cups flour", (None, None)),
])
def test_parse_temperature(text, expected):
    assert parse_temperature(text) == expected


def test_detect_equipment():
    assert detect_equipment("Preheat oven to 400°F.") == ["oven"]
    assert detect_equipment("Sear in a skillet, then simmer") == ["pan", "stove"]
    assert detect_equipment("Fire up the grill") == ["grill"]
    assert detect_equipment("Toss with spices.") is None


@pytest.mark.parametrize("text,expected", [
    ("Let the steak rest 5 minutes", "rest"),
    ("Cover and let sit for 5 minutes", "rest"),
    ("Roast for 25 minutes", "passive"),
    ("Bring to a boil", "passive"),
    ("Preheat oven", "passive"),
    ("Chop the onions", "active"),
])
def test_detect_active_type(text, expected):
    assert detect_active_type(text) == expected


def test_extract_steps_one_per_line():
    text = "Preheat oven to 400°F.\n\n  Toss chickpeas with oil.  \nRoast for 25 minutes.\n"
    steps = extract_steps(text, id_prefix="r1-step")

    assert [s.id for s in steps] == ["r1-step-1", "r1-step-2", "r1-step-3"]
    assert [s.order for s in steps] == [1, 2, 3]
    assert steps[0].active_type == "passive"
    assert steps[0].temperature_value == 400
    assert steps[0].temperature_unit == "F"
    assert steps[0].duration_min is None
    assert steps[1].instruction == "Toss chickpeas with oil."
    assert steps[1].can_pause is False
    assert steps[2].duration_min == 25
    assert steps[2].can_pause is True


def test_extract_steps_empty():
    assert extract_steps("") == []
    assert extract_steps("\n  \n") == []


def test_to_timeline_recipe_prefers_stored_steps():
    recipe = MockRecipe("r1", "Chickpeas", "Ignored line", steps=[
        MockStep("a", 1, "Roast", 25, "passive", True, ["oven"], 400, "F"),
    ])
    result = to_timeline_recipe(recipe)

    assert result.id == "r1"
    assert result.title == "Chickpeas"
    assert len(result.steps) == 1
    assert result.steps[0].id == "a"
    assert result.steps[0].duration_min == 25
    assert result.steps[0].equipment_used == ["oven"]


def test_to_timeline_recipe_extracts_from_text():
    recipe = MockRecipe("r1", "Couscous", "Bring broth to a simmer.\nFluff with a fork.")
    result = to_timeline_recipe(recipe)

    assert [s.id for s in result.steps] == ["r1-step-1", "r1-step-2"]
    assert result.steps[0].equipment_used == ["stove"]


def test_to_timeline_recipe_placeholder_when_empty():
    result = to_timeline_recipe(MockRecipe("r1", "Mystery"))

    assert len(result.steps) == 1
    placeholder = result.steps[0]
    assert placeholder.id == "r1-step-1"
    assert placeholder.instruction == PLACEHOLDER_INSTRUCTION
    assert placeholder.duration_min is None
    assert placeholder.active_type == "active"


def test_text_helpers():
    assert split_lines(" a \r\n\nb\n") == ["a", "b"]
    assert normalize_multiline(" a \r\n\nb\n") == "a\nb"
    assert clean_md("**Roast** chickpeas") == "Roast chickpeas"
    assert clean_md("- Chop onions") == "Chop onions"
    assert clean_md("## Sauce") == "Sauce"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("## **Step 1**", "Step 1"),
        ("2) Simmer", "Simmer"),
        ("3. Serve", "Serve"),
        ("• Stir", "Stir"),
        ("__Rest__ the dough", "Rest the dough"),
        ("****", ""),
        ("", ""),
    ],
)
def test_clean_md(text, expected):
    assert clean_md(text) == expected
