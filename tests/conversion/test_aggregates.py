"""Tests for the built-in robotics aggregate converters."""

from __future__ import annotations

from itertools import product

import pytest

from treeconv.conversion.registry import ConverterRegistry
from treeconv.domain.contact import ContactPoint, Grasp, Hold, Stance
from treeconv.domain.errors import DuplicateKey, MissingField, ShapeMismatch, SizeMismatch
from treeconv.domain.geometry import Vector, Vector3
from treeconv.domain.ik import WORLD, IKGoal, used_slots
from treeconv.domain.tree import Record, Scalar, Sequence, to_plain
from treeconv.domain.types import PosConstraint, RotConstraint

# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


class TestVector3:
    def test_tree(self, registry: ConverterRegistry) -> None:
        node = registry.encode(Vector3(x=1.0, y=2.0, z=3.0))
        assert node == Sequence([Scalar(1.0), Scalar(2.0), Scalar(3.0)])
        assert registry.decode(node, Vector3) == Vector3(x=1.0, y=2.0, z=3.0)

    def test_integers_accepted(self, registry: ConverterRegistry) -> None:
        node = Sequence([Scalar(1), Scalar(0), Scalar(-1)])
        assert registry.decode(node, Vector3) == Vector3(x=1.0, z=-1.0)

    @pytest.mark.parametrize("size", [0, 2, 4])
    def test_wrong_size(self, registry: ConverterRegistry, size: int) -> None:
        node = Sequence([Scalar(0.0)] * size)
        with pytest.raises(SizeMismatch) as exc_info:
            registry.decode(node, Vector3)
        assert (exc_info.value.expected, exc_info.value.actual) == (3, size)

    def test_record_rejected(self, registry: ConverterRegistry) -> None:
        node = Record({"x": Scalar(1.0), "y": Scalar(2.0), "z": Scalar(3.0)})
        with pytest.raises(ShapeMismatch):
            registry.decode(node, Vector3)


class TestVector:
    def test_round_trip(self, registry: ConverterRegistry) -> None:
        vector = Vector(values=(0.1, 0.2, 0.3, 0.4))
        node = registry.encode(vector)
        assert len(node) == 4
        assert registry.decode(node, Vector) == vector

    def test_empty(self, registry: ConverterRegistry) -> None:
        assert registry.encode(Vector()) == Sequence()


# ---------------------------------------------------------------------------
# IK goals
# ---------------------------------------------------------------------------


_GOALS = {
    "fixed-fixed": IKGoal(
        link=5,
        local_position=Vector3(x=0.1),
        end_position=Vector3(x=1.0, y=2.0),
        end_rotation=Vector3(z=0.5),
    ),
    "planar-none": IKGoal(
        link=5,
        dest_link=2,
        pos_constraint=PosConstraint.PLANAR,
        end_position=Vector3(z=0.2),
        direction=Vector3(z=1.0),
        rot_constraint=RotConstraint.NONE,
    ),
    "linear-axis": IKGoal(
        link=5,
        pos_constraint=PosConstraint.LINEAR,
        direction=Vector3(x=1.0),
        rot_constraint=RotConstraint.AXIS,
        local_axis=Vector3(y=1.0),
        end_rotation=Vector3(z=1.0),
    ),
    "none-twoaxis": IKGoal(
        link=5,
        pos_constraint=PosConstraint.NONE,
        rot_constraint=RotConstraint.TWO_AXIS,
        local_axis=Vector3(x=1.0),
        end_rotation=Vector3(y=1.0),
    ),
}


def _full_goal(pos: PosConstraint, rot: RotConstraint, dest_link: int) -> IKGoal:
    """Goal with every slot its constraints use set to a distinct non-zero vector."""
    vectors = {
        name: Vector3(x=0.1 * (i + 1), y=-0.25, z=1.5 * i)
        for i, name in enumerate(sorted(used_slots(pos, rot)))
    }
    return IKGoal(link=4, dest_link=dest_link, pos_constraint=pos, rot_constraint=rot, **vectors)


_COMBINATIONS = list(product(PosConstraint, RotConstraint, [WORLD, 0, 6]))


class TestIKGoal:
    @pytest.mark.parametrize("name", list(_GOALS))
    def test_round_trip(self, registry: ConverterRegistry, name: str) -> None:
        goal = _GOALS[name]
        assert registry.decode(registry.encode(goal), IKGoal) == goal

    @pytest.mark.parametrize(("pos", "rot", "dest_link"), _COMBINATIONS)
    def test_round_trip_every_slot(
        self, registry: ConverterRegistry, pos: PosConstraint, rot: RotConstraint, dest_link: int
    ) -> None:
        goal = _full_goal(pos, rot, dest_link)
        assert registry.decode(registry.encode(goal), IKGoal) == goal

    def test_negative_destination_is_world(self, registry: ConverterRegistry) -> None:
        node = Record({"link": Scalar(1), "destLink": Scalar(-5)})
        goal = registry.decode(node, IKGoal)
        assert goal.dest_link == WORLD
        assert "destLink" not in registry.encode(goal)

    def test_unused_slots_in_document_ignored(self, registry: ConverterRegistry) -> None:
        node = Record(
            {
                "link": Scalar(1),
                "posConstraint": Scalar("none"),
                "localPosition": Sequence([Scalar(1.0), Scalar(0.0), Scalar(0.0)]),
            }
        )
        goal = registry.decode(node, IKGoal)
        assert goal.local_position == Vector3()
        assert registry.decode(registry.encode(goal), IKGoal) == goal

    def test_fixed_slots(self, registry: ConverterRegistry) -> None:
        node = registry.encode(_GOALS["fixed-fixed"])
        assert list(node) == [
            "link",
            "posConstraint",
            "localPosition",
            "endPosition",
            "rotConstraint",
            "endRotation",
        ]
        assert node["posConstraint"] == Scalar("fixed")

    def test_planar_slots(self, registry: ConverterRegistry) -> None:
        node = registry.encode(_GOALS["planar-none"])
        assert list(node) == [
            "link",
            "destLink",
            "posConstraint",
            "localPosition",
            "endPosition",
            "direction",
        ]

    def test_absent_constraints_mean_none(self, registry: ConverterRegistry) -> None:
        goal = registry.decode(Record({"link": Scalar(3)}), IKGoal)
        assert goal.pos_constraint == PosConstraint.NONE
        assert goal.rot_constraint == RotConstraint.NONE
        assert goal.is_world_relative

    def test_missing_slot_for_active_constraint(self, registry: ConverterRegistry) -> None:
        node = registry.encode(_GOALS["linear-axis"])
        del node["direction"]
        with pytest.raises(MissingField) as exc_info:
            registry.decode(node, IKGoal)
        assert exc_info.value.field == "direction"

    def test_missing_link(self, registry: ConverterRegistry) -> None:
        with pytest.raises(MissingField, match="'link'"):
            registry.decode(Record(), IKGoal)


# ---------------------------------------------------------------------------
# Holds, grasps and stances
# ---------------------------------------------------------------------------


class TestContactPoint:
    def test_tree(self, registry: ConverterRegistry) -> None:
        node = registry.encode(ContactPoint(x=Vector3(x=1.0), k_friction=0.4))
        assert to_plain(node) == {"x": [1.0, 0.0, 0.0], "n": [0.0, 0.0, 1.0], "kFriction": 0.4}


class TestHold:
    def test_round_trip(self, registry: ConverterRegistry, hold: Hold) -> None:
        assert registry.decode(registry.encode(hold), Hold) == hold

    def test_nested_error_path(self, registry: ConverterRegistry, hold: Hold) -> None:
        node = registry.encode(hold)
        del node["ikConstraint"]["link"]
        with pytest.raises(MissingField) as exc_info:
            registry.decode(node, Hold)
        assert str(exc_info.value) == "ikConstraint: missing required field 'link'"


class TestGrasp:
    def test_round_trip(self, registry: ConverterRegistry, grasp: Grasp) -> None:
        assert registry.decode(registry.encode(grasp), Grasp) == grasp

    def test_keys(self, registry: ConverterRegistry, grasp: Grasp) -> None:
        assert list(registry.encode(grasp)) == [
            "objectIndex",
            "robotIndex",
            "constraints",
            "fixedDofs",
            "fixedValues",
            "contacts",
            "contactLinks",
        ]

    def test_optional_lists_default_empty(self, registry: ConverterRegistry) -> None:
        node = Record(
            {"objectIndex": Scalar(0), "robotIndex": Scalar(1), "constraints": Sequence()}
        )
        assert registry.decode(node, Grasp) == Grasp(object_index=0, robot_index=1)

    def test_fixed_values_mismatch(self, registry: ConverterRegistry, grasp: Grasp) -> None:
        node = registry.encode(grasp)
        node["fixedValues"].append(Scalar(1.0))
        with pytest.raises(SizeMismatch) as exc_info:
            registry.decode(node, Grasp)
        assert exc_info.value.path == ("fixedValues",)
        assert (exc_info.value.expected, exc_info.value.actual) == (2, 3)

    def test_contact_links_mismatch(self, registry: ConverterRegistry, grasp: Grasp) -> None:
        node = registry.encode(grasp)
        node["contactLinks"] = Sequence()
        with pytest.raises(SizeMismatch) as exc_info:
            registry.decode(node, Grasp)
        assert exc_info.value.location == "contactLinks"


class TestStance:
    def test_round_trip(self, registry: ConverterRegistry, stance: Stance) -> None:
        assert registry.decode(registry.encode(stance), Stance) == stance

    @pytest.mark.parametrize("links", [[0], [9, 2], [1, 4, 6, 11]])
    def test_round_trip_every_field(self, registry: ConverterRegistry, links: list[int]) -> None:
        combos = list(product(PosConstraint, RotConstraint))
        holds = []
        for n, link in enumerate(links):
            pos, rot = combos[(n * 5) % len(combos)]
            goal = _full_goal(pos, rot, dest_link=n - 1)
            contacts = [
                ContactPoint(
                    x=Vector3(x=0.1 * link, y=0.2, z=-0.3),
                    n=Vector3(x=0.6, y=0.0, z=0.8),
                    k_friction=0.25 + n,
                )
                for _ in range(n + 1)
            ]
            holds.append(Hold(link=link, contacts=contacts, ik_constraint=goal))
        stance = Stance.from_holds(holds)
        back = registry.decode(registry.encode(stance), Stance)
        assert back == stance
        assert all(key == hold.link for key, hold in back.holds.items())

    def test_sorted_by_link(self, registry: ConverterRegistry, stance: Stance) -> None:
        node = registry.encode(stance)
        assert [hold["link"] for hold in node] == [Scalar(3), Scalar(7)]

    def test_duplicate_link(self, registry: ConverterRegistry, hold: Hold) -> None:
        node = Sequence([registry.encode(hold), registry.encode(hold)])
        with pytest.raises(DuplicateKey) as exc_info:
            registry.decode(node, Stance)
        assert exc_info.value.path == (1,)

    def test_error_path_through_holds(self, registry: ConverterRegistry, stance: Stance) -> None:
        node = registry.encode(stance)
        node[1]["contacts"][0]["n"] = Sequence([Scalar(0.0)])
        with pytest.raises(SizeMismatch) as exc_info:
            registry.decode(node, Stance)
        assert exc_info.value.location == "[1].contacts[0].n"

    def test_empty(self, registry: ConverterRegistry) -> None:
        assert registry.decode(Sequence(), Stance) == Stance()
