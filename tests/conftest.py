"""Shared pytest fixtures for treeconv tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from treeconv.conversion.defaults import create_registry
from treeconv.conversion.registry import ConverterRegistry
from treeconv.domain.contact import ContactPoint, Grasp, Hold, Stance
from treeconv.domain.geometry import Vector3
from treeconv.domain.ik import IKGoal
from treeconv.domain.types import PosConstraint, RotConstraint


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TREECONV_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("TREECONV_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package = logging.getLogger("treeconv")
    package_level = package.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package.setLevel(package_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ConverterRegistry:
    """Fresh registry with the built-in aggregates registered."""
    return create_registry()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory used as CWD."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Sample aggregates
# ---------------------------------------------------------------------------


@pytest.fixture
def foot_goal() -> IKGoal:
    return IKGoal(
        link=7,
        local_position=Vector3(x=0.0, y=0.0, z=-0.05),
        end_position=Vector3(x=0.3, y=-0.1, z=0.0),
        end_rotation=Vector3(x=0.0, y=0.0, z=1.57),
    )


@pytest.fixture
def hold(foot_goal: IKGoal) -> Hold:
    return Hold(
        link=7,
        contacts=[
            ContactPoint(x=Vector3(x=0.1, y=0.05), k_friction=0.5),
            ContactPoint(x=Vector3(x=-0.1, y=0.05), k_friction=0.5),
        ],
        ik_constraint=foot_goal,
    )


@pytest.fixture
def stance(hold: Hold) -> Stance:
    hand = Hold(
        link=3,
        contacts=[ContactPoint(x=Vector3(x=0.6, z=1.0), n=Vector3(x=-1.0), k_friction=0.8)],
        ik_constraint=IKGoal(
            link=3,
            pos_constraint=PosConstraint.PLANAR,
            local_position=Vector3(x=0.02),
            end_position=Vector3(x=0.6, z=1.0),
            direction=Vector3(x=1.0),
            rot_constraint=RotConstraint.NONE,
        ),
    )
    return Stance.from_holds([hold, hand])


@pytest.fixture
def grasp(foot_goal: IKGoal) -> Grasp:
    return Grasp(
        object_index=2,
        robot_index=0,
        constraints=[foot_goal],
        fixed_dofs=[10, 11],
        fixed_values=[0.25, -0.25],
        contacts=[ContactPoint(x=Vector3(x=0.01), n=Vector3(y=1.0), k_friction=0.7)],
        contact_links=[12],
    )
