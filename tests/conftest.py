"""Pytest configuration for pathtracer tests.

Taichi is initialized once per session on the CPU backend. Tests that need a
scene build their own World; worlds own their fields, so nothing has to be
cleared between tests.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Re-initializing Taichi mid-session invalidates every field and kernel
    built so far, so tests never call ti.init themselves.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def gray_diffuse():
    from pathtracer.materials import Diffuse

    return Diffuse((0.5, 0.5, 0.5))
