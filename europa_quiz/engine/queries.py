"""
Query functions for UI integration.
These functions help the view layer render the map and stats
without mutating quiz state.
"""

from dataclasses import dataclass
from typing import Any

from europa_quiz.engine import MAX_ERRORS
from europa_quiz.engine.state import QuizState, CountryStatus, PENDING, SOLVED, REVEALED
from europa_quiz.engine.actions import Action
from europa_quiz.engine.definitions import QuizDefinitions
from europa_quiz.engine.matcher import display_name
from europa_quiz.engine.reducer import ACTION_TYPES, focus_for

# Solved countries are shaded by how many errors it took; the active one fades per error.
SHADE_LEVELS = 4
HIGHLIGHT_LEVELS = 4


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Action Validation =====

def validate_action(state: QuizState, action: Action, definitions: QuizDefinitions) -> ValidationResult:
    """
    Validate an action without applying it.
    A guess with no target is valid: the reducer ignores it.
    """
    if action.type not in ACTION_TYPES:
        return ValidationResult(False, f"Unknown action '{action.type}'. Allowed: {list(ACTION_TYPES)}")

    if action.type == "change_language":
        language = action.payload.get("language")
        if language not in definitions.languages:
            return ValidationResult(
                False,
                f"Unknown language '{language}'. Available: {sorted(definitions.languages)}"
            )

    if action.type == "submit_guess":
        raw = action.payload.get("raw_input")
        if raw is not None and not isinstance(raw, str):
            return ValidationResult(False, "Guess must be text")

    return ValidationResult(True)


# ===== Progress Queries =====

def get_pending_count(state: QuizState) -> int:
    return sum(1 for c in state.countries if state.status_of(c.canonical_name).state == PENDING)


def attempts_used(status: CountryStatus) -> int:
    """Attempts shown in a resolved country's tooltip: errors + the right answer, or all of them."""
    if status.state == SOLVED:
        return min(status.errors_at_resolution + 1, MAX_ERRORS)
    if status.state == REVEALED:
        return MAX_ERRORS
    return 0


def is_complete(state: QuizState) -> bool:
    """True once the countries are loaded and every round has been played."""
    return state.loaded and state.round.current_position >= len(state.order)


def get_quiz_summary(state: QuizState) -> dict[str, Any]:
    """Score panel data."""
    current = state.current_country()
    return {
        "language": state.language,
        "loaded": state.loaded,
        "total_score": state.score.total_score,
        "correct_count": state.score.correct_count,
        "incorrect_count": state.score.incorrect_count,
        "pending_count": get_pending_count(state),
        "round": state.round.current_position + (1 if current else 0),
        "total_rounds": len(state.order),
        "error_count": state.round.error_count,
        "attempts_left": MAX_ERRORS - state.round.error_count if current else 0,
        "current_country": current.canonical_name if current else None,
        "complete": is_complete(state),
    }


# ===== Map Queries =====

def country_view(state: QuizState, canonical_name: str, definitions: QuizDefinitions) -> dict[str, Any]:
    """
    Everything the map needs to draw one country.

    shade_level: 0..3 error depth of a solved country (0 = first try).
    highlight_level: 0..3 fading of the active country, keyed to the current error count.
    """
    status = state.status_of(canonical_name)
    current = state.current_country()
    highlighted = current is not None and current.canonical_name == canonical_name
    out = {
        "country": canonical_name,
        "state": status.state,
        "errors": status.errors_at_resolution,
        "shade_level": min(status.errors_at_resolution, SHADE_LEVELS - 1) if status.state == SOLVED else None,
        "highlighted": highlighted,
        "highlight_level": min(state.round.error_count, HIGHLIGHT_LEVELS - 1) if highlighted else None,
    }
    if status.is_resolved:
        out["display_name"] = display_name(canonical_name, state.language, definitions)
        out["attempts_used"] = attempts_used(status)
        out["max_attempts"] = MAX_ERRORS
    return out


def get_map_view(state: QuizState, definitions: QuizDefinitions) -> dict[str, Any]:
    """Per-country views plus the current map focus."""
    current = state.current_country()
    if current is None:
        zoom, center = definitions.default_zoom, definitions.default_center
    else:
        zoom, center = focus_for(current, state.focus.step, definitions)
    return {
        "countries": [
            dict(country_view(state, c.canonical_name, definitions), anchor_point=list(c.anchor_point))
            for c in state.countries
        ],
        "focus": {
            "country": current.canonical_name if current else None,
            "zoom": zoom,
            "center": list(center),
            "step": state.focus.step,
        },
    }
