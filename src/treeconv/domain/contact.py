"""Contact, hold, grasp and stance descriptions."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from treeconv.domain.geometry import Vector3
from treeconv.domain.ik import IKGoal


class ContactPoint(BaseModel):
    """Point contact with outward normal and friction coefficient."""

    model_config = {"frozen": True}

    x: Vector3 = Field(default_factory=Vector3)
    n: Vector3 = Field(default_factory=lambda: Vector3(z=1.0))
    k_friction: float = 0.0


class Hold(BaseModel):
    """Contacts between one link and the environment, plus the IK goal that keeps them."""

    model_config = {"frozen": True}

    link: int
    contacts: list[ContactPoint] = Field(default_factory=list)
    ik_constraint: IKGoal


class Grasp(BaseModel):
    """A robot hand grasping an object.

    ``fixed_dofs[i]`` is held at ``fixed_values[i]``; ``contacts[i]`` is made
    by link ``contact_links[i]``.
    """

    model_config = {"frozen": True}

    object_index: int = -1
    robot_index: int = 0
    constraints: list[IKGoal] = Field(default_factory=list)
    fixed_dofs: list[int] = Field(default_factory=list)
    fixed_values: list[float] = Field(default_factory=list)
    contacts: list[ContactPoint] = Field(default_factory=list)
    contact_links: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def paired_lengths(self) -> Grasp:
        if len(self.fixed_values) != len(self.fixed_dofs):
            raise ValueError("fixed_values must pair one-to-one with fixed_dofs")
        if len(self.contact_links) != len(self.contacts):
            raise ValueError("contact_links must pair one-to-one with contacts")
        return self


class Stance(BaseModel):
    """Set of holds keyed by link index."""

    model_config = {"frozen": True}

    holds: dict[int, Hold] = Field(default_factory=dict)

    @model_validator(mode="after")
    def keyed_by_link(self) -> Stance:
        """Every hold must be filed under its own link."""
        misfiled = sorted(key for key, hold in self.holds.items() if key != hold.link)
        if misfiled:
            raise ValueError(f"holds under keys {misfiled} do not match their link")
        return self

    @classmethod
    def from_holds(cls, holds: list[Hold]) -> Stance:
        return cls(holds={hold.link: hold for hold in holds})

    def __len__(self) -> int:
        return len(self.holds)
