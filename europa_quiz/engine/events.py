"""
Quiz events for UI hooks and logging.
Events describe what happened during action processing; the view layer
renders messages, map focus and result tooltips from them.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameEvent":
        return cls(type=data["type"], payload=data["payload"])


# ===== Event Type Constants =====

# Guess outcome messages (exactly one per non-blank guess)
GUESS_CORRECT = "guess_correct"
GUESS_RETRY = "guess_retry"
COUNTRY_REVEALED = "country_revealed"

# Presentation hints
FOCUS_CHANGED = "focus_changed"
RESULT_SPOTLIGHT = "result_spotlight"

# Session events
COUNTRIES_LOADED = "countries_loaded"
QUIZ_RESTARTED = "quiz_restarted"
QUIZ_COMPLETED = "quiz_completed"
LANGUAGE_CHANGED = "language_changed"

MESSAGE_EVENT_TYPES = (GUESS_CORRECT, GUESS_RETRY, COUNTRY_REVEALED)


# ===== Event Factory Functions =====

def guess_correct(
    country: str,
    points_gained: int,
    error_count: int,
    total_score: int,
    message: str,
) -> GameEvent:
    return GameEvent(GUESS_CORRECT, {
        "country": country,
        "points_gained": points_gained,
        "error_count": error_count,  # Wrong guesses before the right one
        "total_score": total_score,
        "message": message,
    })


def guess_retry(country: str, error_count: int, attempts_left: int, message: str) -> GameEvent:
    return GameEvent(GUESS_RETRY, {
        "country": country,
        "error_count": error_count,
        "attempts_left": attempts_left,
        "message": message,
    })


def country_revealed(canonical_name: str, display_name: str, message: str) -> GameEvent:
    return GameEvent(COUNTRY_REVEALED, {
        "country": canonical_name,
        "canonical_name": canonical_name,
        "display_name": display_name,  # First alias in the current language
        "message": message,
    })


def focus_changed(country: str | None, zoom: int, center: tuple[float, float], step: int) -> GameEvent:
    return GameEvent(FOCUS_CHANGED, {
        "country": country,
        "zoom": zoom,
        "center": list(center),
        "step": step,  # 0 = base zoom of the country
    })


def result_spotlight(country: str, state: str, duration_seconds: float) -> GameEvent:
    """Briefly show the resolved country's tooltip; purely cosmetic."""
    return GameEvent(RESULT_SPOTLIGHT, {
        "country": country,
        "state": state,
        "duration_seconds": duration_seconds,
    })


def countries_loaded(count: int) -> GameEvent:
    return GameEvent(COUNTRIES_LOADED, {"count": count})


def quiz_restarted(count: int) -> GameEvent:
    return GameEvent(QUIZ_RESTARTED, {"count": count})


def quiz_completed(total_score: int, correct_count: int, incorrect_count: int) -> GameEvent:
    return GameEvent(QUIZ_COMPLETED, {
        "total_score": total_score,
        "correct_count": correct_count,
        "incorrect_count": incorrect_count,
    })


def language_changed(old_language: str, new_language: str) -> GameEvent:
    return GameEvent(LANGUAGE_CHANGED, {
        "old_language": old_language,
        "new_language": new_language,
    })
