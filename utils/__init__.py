"""Utility modules for logging, identifiers and progress reporting."""

from utils.formatting import format_amount
from utils.ids import generate_id, sequential_ids
from utils.logging_config import get_logger, setup_logging
from utils.progress import ProgressCallback, TqdmProgress, scaled_progress

__all__ = [
    "setup_logging",
    "get_logger",
    "generate_id",
    "sequential_ids",
    "format_amount",
    "ProgressCallback",
    "TqdmProgress",
    "scaled_progress",
]
