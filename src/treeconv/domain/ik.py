"""Inverse-kinematics goal.

An :class:`IKGoal` pins a point (and optionally an orientation) of a robot
link either to the world (``dest_link == -1``) or to another link. Which of
the vector fields are meaningful depends on the constraint kinds:

- position ``fixed``: ``local_position`` maps onto ``end_position``.
- position ``planar`` / ``linear``: additionally uses ``direction`` (plane
  normal or line direction).
- rotation ``fixed``: ``end_rotation`` is a rotation (moment) vector.
- rotation ``axis`` / ``twoaxis``: ``local_axis`` maps onto ``end_rotation``.

Vectors the constraints do not use must stay zero, so a goal is fully
described by the slots a document carries for it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from treeconv.domain.geometry import Vector3
from treeconv.domain.types import PosConstraint, RotConstraint

WORLD = -1

_POSITION_WITH_DIRECTION = frozenset({PosConstraint.PLANAR, PosConstraint.LINEAR})
_ROTATION_WITH_AXIS = frozenset({RotConstraint.AXIS, RotConstraint.TWO_AXIS})


def used_slots(pos: PosConstraint, rot: RotConstraint) -> set[str]:
    """Names of the vector fields that *pos* and *rot* give meaning to."""
    slots: set[str] = set()
    if pos != PosConstraint.NONE:
        slots |= {"local_position", "end_position"}
        if pos in _POSITION_WITH_DIRECTION:
            slots.add("direction")
    if rot != RotConstraint.NONE:
        slots.add("end_rotation")
        if rot in _ROTATION_WITH_AXIS:
            slots.add("local_axis")
    return slots


_VECTOR_SLOTS = ("local_position", "end_position", "direction", "local_axis", "end_rotation")


class IKGoal(BaseModel):
    """Position/orientation target for one link."""

    model_config = {"frozen": True}

    link: int
    dest_link: int = Field(WORLD, ge=WORLD)
    pos_constraint: PosConstraint = PosConstraint.FIXED
    local_position: Vector3 = Field(default_factory=Vector3)
    end_position: Vector3 = Field(default_factory=Vector3)
    direction: Vector3 = Field(default_factory=Vector3)
    rot_constraint: RotConstraint = RotConstraint.FIXED
    local_axis: Vector3 = Field(default_factory=Vector3)
    end_rotation: Vector3 = Field(default_factory=Vector3)

    @model_validator(mode="after")
    def unused_slots_zero(self) -> IKGoal:
        """Reject non-zero vectors the constraint kinds leave unused."""
        used = used_slots(self.pos_constraint, self.rot_constraint)
        stray = [
            name for name in _VECTOR_SLOTS if name not in used and getattr(self, name) != Vector3()
        ]
        if stray:
            raise ValueError(
                f"{', '.join(stray)} unused by position {self.pos_constraint} "
                f"and rotation {self.rot_constraint} constraints; must be zero"
            )
        return self

    @property
    def is_world_relative(self) -> bool:
        return self.dest_link == WORLD
