"""
Shared fixtures: packaged definitions and small deterministic quiz sessions.
"""

import random

import pytest

from europa_quiz.engine.definitions import load_definitions
from europa_quiz.engine.state import Country
from europa_quiz.engine.utils import initialize_quiz_state

ANCHORS = {
    "France": (2.5, 46.6),
    "Germany": (10.4, 51.1),
    "Spain": (-3.6, 40.2),
    "Monaco": (7.42, 43.74),
    "Vatican": (12.45, 41.9),
    "Portugal": (-8.2, 39.6),
}


@pytest.fixture(scope="session")
def definitions():
    return load_definitions()


def make_countries(*names: str) -> list[Country]:
    return [Country(id=name, canonical_name=name, anchor_point=ANCHORS.get(name, (0.0, 0.0))) for name in names]


@pytest.fixture
def make_state(definitions):
    """Build a loaded quiz whose rounds follow the given names in order."""
    def _make(*names: str, language: str = "es"):
        state = initialize_quiz_state(
            definitions,
            language=language,
            countries=make_countries(*names),
            rng=random.Random(0),
        )
        state.order = list(range(len(names)))
        return state
    return _make
