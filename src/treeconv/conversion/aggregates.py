"""Converters for the built-in robotics aggregates.

Document shapes (keys are camelCase, matching existing robot resource
files):

- ``Vector3`` — ``[x, y, z]``, exactly three numbers.
- ``Vector`` — ``[v0, v1, ...]``.
- ``ContactPoint`` — ``{x, n, kFriction}``.
- ``IKGoal`` — ``{link, destLink?, posConstraint?, localPosition?,
  endPosition?, direction?, rotConstraint?, localAxis?, endRotation?}``.
  Only the slots used by the active constraints are written; an absent
  ``destLink`` means the world and an absent constraint means ``none``.
- ``Hold`` — ``{link, contacts, ikConstraint}``.
- ``Grasp`` — ``{objectIndex, robotIndex, constraints, fixedDofs,
  fixedValues, contacts, contactLinks}``; the paired lists must have equal
  lengths.
- ``Stance`` — ``[hold, ...]`` ordered by link, at most one hold per link.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from treeconv.domain.contact import ContactPoint, Grasp, Hold, Stance
from treeconv.domain.errors import DuplicateKey, SizeMismatch, at_path
from treeconv.domain.geometry import Vector, Vector3
from treeconv.domain.ik import WORLD, IKGoal
from treeconv.domain.tree import Node, Record, Scalar, Sequence, expect_record, expect_sequence
from treeconv.domain.types import PosConstraint, RotConstraint

if TYPE_CHECKING:
    from treeconv.conversion.registry import ConverterRegistry

_POSITION_WITH_DIRECTION = frozenset({PosConstraint.PLANAR, PosConstraint.LINEAR})


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


def encode_vector3(value: Vector3, registry: ConverterRegistry) -> Node:
    return Sequence([Scalar(component) for component in value.as_tuple()])


def decode_vector3(node: Node, registry: ConverterRegistry) -> Vector3:
    sequence = expect_sequence(node)
    if len(sequence) != 3:
        raise SizeMismatch(3, len(sequence))
    x, y, z = registry.decode(sequence, list[float])
    return Vector3(x=x, y=y, z=z)


def encode_vector(value: Vector, registry: ConverterRegistry) -> Node:
    return registry.encode(list(value.values), list[float])


def decode_vector(node: Node, registry: ConverterRegistry) -> Vector:
    return Vector(values=registry.decode(node, tuple[float, ...]))


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------


def encode_contact_point(value: ContactPoint, registry: ConverterRegistry) -> Node:
    return Record(
        {
            "x": registry.encode(value.x, Vector3),
            "n": registry.encode(value.n, Vector3),
            "kFriction": Scalar(value.k_friction),
        }
    )


def decode_contact_point(node: Node, registry: ConverterRegistry) -> ContactPoint:
    record = expect_record(node)
    return ContactPoint(
        x=registry.decode_field(record, "x", Vector3),
        n=registry.decode_field(record, "n", Vector3),
        k_friction=registry.decode_field(record, "kFriction", float),
    )


# ---------------------------------------------------------------------------
# IK goals
# ---------------------------------------------------------------------------


def encode_ik_goal(goal: IKGoal, registry: ConverterRegistry) -> Node:
    record = Record({"link": Scalar(goal.link)})
    if goal.dest_link >= 0:
        record["destLink"] = Scalar(goal.dest_link)

    if goal.pos_constraint != PosConstraint.NONE:
        record["posConstraint"] = registry.encode(goal.pos_constraint, PosConstraint)
        record["localPosition"] = registry.encode(goal.local_position, Vector3)
        record["endPosition"] = registry.encode(goal.end_position, Vector3)
        if goal.pos_constraint in _POSITION_WITH_DIRECTION:
            record["direction"] = registry.encode(goal.direction, Vector3)

    if goal.rot_constraint != RotConstraint.NONE:
        record["rotConstraint"] = registry.encode(goal.rot_constraint, RotConstraint)
        if goal.rot_constraint != RotConstraint.FIXED:
            record["localAxis"] = registry.encode(goal.local_axis, Vector3)
        record["endRotation"] = registry.encode(goal.end_rotation, Vector3)
    return record


def decode_ik_goal(node: Node, registry: ConverterRegistry) -> IKGoal:
    record = expect_record(node)
    fields: dict[str, Any] = {
        "link": registry.decode_field(record, "link", int),
        # any negative destination is the world
        "dest_link": max(registry.decode_field(record, "destLink", int, WORLD), WORLD),
    }

    pos = registry.decode_field(record, "posConstraint", PosConstraint, PosConstraint.NONE)
    fields["pos_constraint"] = pos
    if pos != PosConstraint.NONE:
        fields["local_position"] = registry.decode_field(record, "localPosition", Vector3)
        fields["end_position"] = registry.decode_field(record, "endPosition", Vector3)
        if pos in _POSITION_WITH_DIRECTION:
            fields["direction"] = registry.decode_field(record, "direction", Vector3)

    rot = registry.decode_field(record, "rotConstraint", RotConstraint, RotConstraint.NONE)
    fields["rot_constraint"] = rot
    if rot != RotConstraint.NONE:
        if rot != RotConstraint.FIXED:
            fields["local_axis"] = registry.decode_field(record, "localAxis", Vector3)
        fields["end_rotation"] = registry.decode_field(record, "endRotation", Vector3)
    return IKGoal(**fields)


# ---------------------------------------------------------------------------
# Holds, grasps and stances
# ---------------------------------------------------------------------------


def encode_hold(hold: Hold, registry: ConverterRegistry) -> Node:
    return Record(
        {
            "link": Scalar(hold.link),
            "contacts": registry.encode(hold.contacts, list[ContactPoint]),
            "ikConstraint": registry.encode(hold.ik_constraint, IKGoal),
        }
    )


def decode_hold(node: Node, registry: ConverterRegistry) -> Hold:
    record = expect_record(node)
    return Hold(
        link=registry.decode_field(record, "link", int),
        contacts=registry.decode_field(record, "contacts", list[ContactPoint]),
        ik_constraint=registry.decode_field(record, "ikConstraint", IKGoal),
    )


def encode_grasp(grasp: Grasp, registry: ConverterRegistry) -> Node:
    return Record(
        {
            "objectIndex": Scalar(grasp.object_index),
            "robotIndex": Scalar(grasp.robot_index),
            "constraints": registry.encode(grasp.constraints, list[IKGoal]),
            "fixedDofs": registry.encode(grasp.fixed_dofs, list[int]),
            "fixedValues": registry.encode(grasp.fixed_values, list[float]),
            "contacts": registry.encode(grasp.contacts, list[ContactPoint]),
            "contactLinks": registry.encode(grasp.contact_links, list[int]),
        }
    )


def decode_grasp(node: Node, registry: ConverterRegistry) -> Grasp:
    record = expect_record(node)
    object_index = registry.decode_field(record, "objectIndex", int)
    robot_index = registry.decode_field(record, "robotIndex", int)
    constraints = registry.decode_field(record, "constraints", list[IKGoal])
    fixed_dofs = registry.decode_field(record, "fixedDofs", list[int], [])
    fixed_values = registry.decode_field(record, "fixedValues", list[float], [])
    if len(fixed_values) != len(fixed_dofs):
        raise SizeMismatch(len(fixed_dofs), len(fixed_values), path=("fixedValues",))
    contacts = registry.decode_field(record, "contacts", list[ContactPoint], [])
    contact_links = registry.decode_field(record, "contactLinks", list[int], [])
    if len(contact_links) != len(contacts):
        raise SizeMismatch(len(contacts), len(contact_links), path=("contactLinks",))
    return Grasp(
        object_index=object_index,
        robot_index=robot_index,
        constraints=constraints,
        fixed_dofs=fixed_dofs,
        fixed_values=fixed_values,
        contacts=contacts,
        contact_links=contact_links,
    )


def encode_stance(stance: Stance, registry: ConverterRegistry) -> Node:
    ordered = [stance.holds[link] for link in sorted(stance.holds)]
    return registry.encode(ordered, list[Hold])


def decode_stance(node: Node, registry: ConverterRegistry) -> Stance:
    sequence = expect_sequence(node)
    holds: dict[int, Hold] = {}
    for index, child in enumerate(sequence.items):
        with at_path(index):
            hold = registry.decode(child, Hold)
            if hold.link in holds:
                raise DuplicateKey(f"link {hold.link} already has a hold")
        holds[hold.link] = hold
    return Stance(holds=holds)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

BUILTIN_CONVERTERS: dict[type, tuple[Any, Any]] = {
    Vector3: (encode_vector3, decode_vector3),
    Vector: (encode_vector, decode_vector),
    ContactPoint: (encode_contact_point, decode_contact_point),
    IKGoal: (encode_ik_goal, decode_ik_goal),
    Hold: (encode_hold, decode_hold),
    Grasp: (encode_grasp, decode_grasp),
    Stance: (encode_stance, decode_stance),
}


def register_builtin_converters(registry: ConverterRegistry) -> None:
    """Register every built-in aggregate converter on *registry*."""
    for target, (encode, decode) in BUILTIN_CONVERTERS.items():
        registry.register(target, encode=encode, decode=decode)
