import re

BOLD_REGEX = re.compile(r"(\*\*|__)(.*?)\1")
HEADER_REGEX = re.compile(r"^\s*#+\s+")
BULLET_REGEX = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")
LINE_BREAK_REGEX = re.compile(r"\r?\n")


def clean_md(text: str) -> str:
    """
    Strip markdown left over from pasted recipes.

    "## **Step 1**" -> "Step 1", "- Chop onions" -> "Chop onions",
    "2) Simmer" -> "Simmer". Pure markup ("****") cleans to "".
    """
    if not text:
        return ""
    text = BOLD_REGEX.sub(r"\2", text)
    text = HEADER_REGEX.sub("", text)
    text = BULLET_REGEX.sub("", text)
    return text.strip(" \t*_")


def split_lines(text: str) -> list[str]:
    """Split on newlines, trimming each line and dropping blank ones."""
    if not text:
        return []
    return [line.strip() for line in LINE_BREAK_REGEX.split(text) if line.strip()]


def normalize_multiline(text: str) -> str:
    return "\n".join(split_lines(text))
