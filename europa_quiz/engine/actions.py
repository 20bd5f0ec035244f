"""
Action definitions for the quiz.
Actions are immutable, deterministic instructions; the reducer applies them.
"""

from dataclasses import dataclass

from europa_quiz.engine.state import Country


@dataclass(frozen=True)
class Action:
    """Base action class. All actions have a type and a payload."""
    type: str  # "submit_guess", "restart", "change_language", "load_countries"
    payload: dict  # Action-specific data


def submit_guess(raw_input: str) -> Action:
    """
    Submit the typed answer for the highlighted country.
    A blank answer (after normalization) cycles the map zoom and is not an attempt.
    """
    return Action(type="submit_guess", payload={"raw_input": raw_input or ""})


def restart() -> Action:
    """Reshuffle the countries and reset score, counters and statuses."""
    return Action(type="restart", payload={})


def change_language(language: str) -> Action:
    """Switch answer/message language. Scoring state is kept."""
    return Action(type="change_language", payload={"language": language})


def load_countries(countries: list[Country]) -> Action:
    """
    Hand the countries derived from the geography source to the quiz.
    Repeating it with the same country set is a no-op.
    """
    return Action(type="load_countries", payload={"countries": list(countries)})
