"""Shared test fixtures."""

import random

import pytest

from board import generate_board


@pytest.fixture
def board():
    """Standard 37-cell board without holes."""
    return generate_board()


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
