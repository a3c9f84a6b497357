"""Data dictionary: one summary row per column, plus JSON and Markdown renderings."""

from .builder import MORE_LABEL, DictionaryRow, LevelFrequency, LevelRemainder, build_dictionary
from .render import dictionary_to_records, render_dictionary_markdown

__all__ = [
    "MORE_LABEL",
    "DictionaryRow",
    "LevelFrequency",
    "LevelRemainder",
    "build_dictionary",
    "dictionary_to_records",
    "render_dictionary_markdown",
]
