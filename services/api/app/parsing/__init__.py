from .ingredient_parser import ParsedIngredient, parse_ingredient, parse_quantity, sanitize_ingredient_text
from .durations import format_duration

__all__ = ["ParsedIngredient", "parse_ingredient", "parse_quantity", "sanitize_ingredient_text", "format_duration"]
