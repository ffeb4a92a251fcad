from .step_extract import (
    parse_duration_min,
    parse_temperature,
    detect_equipment,
    detect_active_type,
    extract_steps,
    to_timeline_recipe,
)

__all__ = ["parse_duration_min", "parse_temperature", "detect_equipment", "detect_active_type", "extract_steps", "to_timeline_recipe"]
