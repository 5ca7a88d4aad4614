"""Backend and logging configuration.

Taichi must be initialized once per process before any world, camera or
renderer is built. ``init_backend`` wraps ``ti.init``: the default ``auto``
arch tries the GPU first and falls back to the CPU. The default arch can be
set with the ``PATHTRACER_ARCH`` environment variable.

Serial rendering pins the CPU backend to a single thread, so every kernel
runs its pixels one after another.
"""

from __future__ import annotations

import logging
import os

import taichi as ti

logger = logging.getLogger(__name__)

ARCH_ENV_VAR = "PATHTRACER_ARCH"
ARCHES = ("auto", "gpu", "cpu")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_arch() -> str:
    """Arch named by PATHTRACER_ARCH, or ``auto`` when unset."""
    return os.environ.get(ARCH_ENV_VAR, "auto").strip().lower() or "auto"


def init_backend(
    arch: str | None = None,
    random_seed: int | None = None,
    parallel: bool = True,
) -> str:
    """Initialize Taichi.

    Args:
        arch: ``"auto"``, ``"gpu"`` or ``"cpu"``. None reads PATHTRACER_ARCH.
        random_seed: Optional seed for ``ti.random``. Renders are not
            guaranteed to be reproducible across backends even when seeded.
        parallel: False renders on a single CPU thread; ``auto`` then
            selects the CPU backend.

    Returns:
        The arch that was initialized, ``"gpu"`` or ``"cpu"``.

    Raises:
        ValueError: If arch is not one of the supported names, or serial
            rendering is requested on the GPU.
    """
    if arch is None:
        arch = default_arch()
    if arch not in ARCHES:
        raise ValueError(f"Unknown arch {arch!r}; expected one of {', '.join(ARCHES)}")
    if not parallel:
        if arch == "gpu":
            raise ValueError("Serial rendering requires the CPU backend")
        arch = "cpu"

    kwargs = {}
    if random_seed is not None:
        kwargs["random_seed"] = random_seed
    if not parallel:
        kwargs["cpu_max_num_threads"] = 1

    if arch == "cpu":
        ti.init(arch=ti.cpu, **kwargs)
        logger.info("Using CPU backend%s", "" if parallel else " (single thread)")
        return "cpu"

    try:
        ti.init(arch=ti.gpu, **kwargs)
        logger.info("Using GPU backend")
        return "gpu"
    except Exception as exc:
        if arch == "gpu":
            raise
        logger.warning("GPU backend unavailable (%s); falling back to CPU", exc)
        ti.init(arch=ti.cpu, **kwargs)
        logger.info("Using CPU backend")
        return "cpu"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the root logger for command-line use."""
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
