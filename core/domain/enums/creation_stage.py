"""
Creation Stage Enum.

Stages of the atomic order / credit note creation pipeline.
"""
from enum import Enum


class CreationStage(str, Enum):
    """Progress of an atomic creation."""

    STARTED = "started"
    VALIDATED = "validated"
    HEADER_WRITTEN = "header_written"
    CHILDREN_WRITTEN = "children_written"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
