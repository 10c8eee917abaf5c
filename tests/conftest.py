"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from raytrace.world import default_world as build_default_world  # noqa: E402


def assert_tuple_approx(actual, expected, abs_tol=1e-4):
    """Compare points, vectors and colors component-wise."""
    assert len(actual) == len(expected)
    assert tuple(actual) == pytest.approx(tuple(expected), abs=abs_tol)


@pytest.fixture
def default_world():
    """Two concentric spheres lit by a white point light at (-10, 10, -10)."""
    return build_default_world()


@pytest.fixture
def temp_output_dir(tmp_path):
    """Provide a temporary directory for test outputs."""
    out = tmp_path / "outputs"
    out.mkdir()
    return out
