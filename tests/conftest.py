"""Pytest configuration and shared fixtures for solverkit tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A buffer capturing solverkit log output
"""

import logging
import os
from io import StringIO
from typing import Iterator

import numpy as np
import pytest
import torch

from solverkit.logging import configure_logging


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests."""
    generator = torch.Generator()
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture
def log_stream() -> Iterator[StringIO]:
    """Route all solverkit loggers at INFO level into a buffer."""
    stream = StringIO()
    configure_logging(level=logging.INFO, stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)
