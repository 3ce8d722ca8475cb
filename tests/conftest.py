"""Pytest configuration with in-memory scene and camera collaborators."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_ROOT = _PROJECT_ROOT / "src"

if str(_SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(_SRC_ROOT))


class FakeNode:
    def __init__(self, identifier, position, radius, rotation=None):
        self.identifier = identifier
        self.position = np.array(position, dtype=float)
        self.radius = float(radius)
        self.rotation = np.eye(3) if rotation is None else np.array(rotation, dtype=float)

    def world_position(self):
        return self.position.copy()

    def world_rotation_matrix(self):
        return self.rotation.copy()

    def bounding_radius(self):
        return self.radius


class FakeScene:
    def __init__(self, *nodes):
        self.nodes = {node.identifier: node for node in nodes}
        self.lookups = []

    def add(self, node):
        self.nodes[node.identifier] = node
        return node

    def find_node(self, identifier):
        self.lookups.append(identifier)
        return self.nodes.get(identifier)


class FakeCamera:
    """Camera sink without anchor support."""

    def __init__(self, position=(0.0, 0.0, 0.0), rotation=(1.0, 0.0, 0.0, 0.0)):
        self.position = np.array(position, dtype=float)
        self.rotation = np.array(rotation, dtype=float)
        self.poses = []

    def get_pose(self):
        return self.position.copy(), self.rotation.copy()

    def set_pose(self, position, rotation):
        self.position = np.array(position, dtype=float)
        self.rotation = np.array(rotation, dtype=float)
        self.poses.append((self.position.copy(), self.rotation.copy()))


class AnchoredCamera(FakeCamera):
    def __init__(self, anchor=None, **kwargs):
        super().__init__(**kwargs)
        self.anchor = anchor
        self.anchor_history = []

    def anchor_node(self):
        return self.anchor

    def set_anchor_node(self, identifier):
        self.anchor = identifier
        self.anchor_history.append(identifier)


EARTH_POSITION = (0.0, 0.0, -100.0)
EARTH_RADIUS = 10.0
MOON_POSITION = (60.0, 0.0, -100.0)
MOON_RADIUS = 2.0


@pytest.fixture
def earth():
    return FakeNode("Earth", EARTH_POSITION, EARTH_RADIUS)


@pytest.fixture
def moon():
    return FakeNode("Moon", MOON_POSITION, MOON_RADIUS)


@pytest.fixture
def scene(earth, moon):
    return FakeScene(earth, moon)


@pytest.fixture
def camera():
    # At the origin looking down -Z
    return FakeCamera()


@pytest.fixture
def anchored_camera():
    return AnchoredCamera(anchor="Earth")
