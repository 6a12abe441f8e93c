"""Classification enums.

Constraint kinds of an IK goal and the textual document formats. Values are
the exact strings written into documents.
"""

from __future__ import annotations

from enum import StrEnum


class PosConstraint(StrEnum):
    """Position constraint of an IK goal."""

    NONE = "none"
    PLANAR = "planar"
    LINEAR = "linear"
    FIXED = "fixed"


class RotConstraint(StrEnum):
    """Rotation constraint of an IK goal."""

    NONE = "none"
    TWO_AXIS = "twoaxis"
    AXIS = "axis"
    FIXED = "fixed"


class DocumentFormat(StrEnum):
    """Textual encodings of a value tree."""

    JSON = "json"
    YAML = "yaml"
