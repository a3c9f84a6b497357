"""Preparation pipeline: load -> type -> label -> {dictionary, sanitize -> table view}."""

from .context import PrepContext
from .run import PrepResult, prepare_dataset, run_prep

__all__ = ["PrepContext", "PrepResult", "prepare_dataset", "run_prep"]
