"""
Main quiz reducer (the game controller).
Applies actions to state, enforcing the scoring rules and producing new state.
Returns (new_state, events) where events describe what happened.
"""

import random

from europa_quiz.engine import MAX_ERRORS, FOCUS_STEPS, RESULT_SPOTLIGHT_SECONDS
from europa_quiz.engine.state import QuizState, Country, SOLVED, REVEALED
from europa_quiz.engine.actions import Action
from europa_quiz.engine.definitions import QuizDefinitions
from europa_quiz.engine.matcher import normalize, matches, display_name
from europa_quiz.engine.sequencer import new_order
from europa_quiz.engine.scoring import record_correct, record_miss, reset_progress, OUTCOME_RETRY
from europa_quiz.engine.messages import correct_message, reveal_message, retry_message
from europa_quiz.engine.events import (
    GameEvent,
    guess_correct,
    guess_retry,
    country_revealed,
    focus_changed,
    result_spotlight,
    countries_loaded,
    quiz_restarted,
    quiz_completed,
    language_changed,
)

ACTION_TYPES = ("submit_guess", "restart", "change_language", "load_countries")


def focus_for(country: Country, step: int, definitions: QuizDefinitions) -> tuple[int, tuple[float, float]]:
    """
    Zoom and map center for a country at a given focus step.
    At step 0 small countries (base zoom above default) stay centered on themselves;
    the rest show the whole map.
    """
    base = definitions.zoom_level(country.canonical_name)
    if step > 0 or base > definitions.default_zoom:
        return base + step, country.anchor_point
    return base, definitions.default_center


def _focus_event(state: QuizState, definitions: QuizDefinitions) -> GameEvent:
    country = state.current_country()
    if country is None:
        return focus_changed(None, definitions.default_zoom, definitions.default_center, 0)
    zoom, center = focus_for(country, state.focus.step, definitions)
    return focus_changed(country.canonical_name, zoom, center, state.focus.step)


def _after_resolution(state: QuizState, definitions: QuizDefinitions) -> list[GameEvent]:
    """Events once the active country is resolved: focus on the next one, or completion."""
    if state.current_country() is None:
        return [quiz_completed(
            state.score.total_score,
            state.score.correct_count,
            state.score.incorrect_count,
        )]
    return [_focus_event(state, definitions)]


def apply_action(
    state: QuizState,
    action: Action,
    definitions: QuizDefinitions,
    rng: random.Random | None = None,
    spotlight_seconds: float = RESULT_SPOTLIGHT_SECONDS,
) -> tuple[QuizState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    A guess with no targeted country (not loaded yet, or every round played)
    changes nothing and yields no events.

    Args:
        state: Current quiz state (not modified)
        action: Action to apply
        definitions: Quiz definitions (aliases, zoom levels, messages)
        rng: Random source for shuffling; seed it for deterministic orders
        spotlight_seconds: How long the result tooltip should stay up

    Returns:
        Tuple of (new_state, events) where events describe what happened

    Raises:
        ValueError: unknown action type or unknown language
    """
    if action.type not in ACTION_TYPES:
        raise ValueError(
            f"Unknown action '{action.type}'. Allowed actions: {', '.join(ACTION_TYPES)}"
        )

    if action.type == "submit_guess" and state.current_country() is None:
        return state.copy(), []

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type == "submit_guess":
        new_state, evts = _handle_submit_guess(new_state, action, definitions, spotlight_seconds)
        events.extend(evts)

    elif action.type == "restart":
        new_state, evts = _handle_restart(new_state, definitions, rng)
        events.extend(evts)

    elif action.type == "change_language":
        new_state, evts = _handle_change_language(new_state, action, definitions)
        events.extend(evts)

    elif action.type == "load_countries":
        new_state, evts = _handle_load_countries(new_state, action, definitions, rng)
        events.extend(evts)

    return new_state, events


def _handle_submit_guess(
    state: QuizState,
    action: Action,
    definitions: QuizDefinitions,
    spotlight_seconds: float,
) -> tuple[QuizState, list[GameEvent]]:
    """Blank input cycles the zoom; anything else is a scored attempt."""
    country = state.current_country()
    name = country.canonical_name
    raw_input = action.payload.get("raw_input") or ""
    lang = state.language

    if normalize(raw_input) == "":
        state.focus.step = (state.focus.step + 1) % FOCUS_STEPS
        return state, [_focus_event(state, definitions)]

    if matches(name, raw_input, lang, definitions):
        errors = state.round.error_count
        gained = record_correct(state, name)
        events = [
            guess_correct(name, gained, errors, state.score.total_score,
                          correct_message(definitions, lang, gained)),
            result_spotlight(name, SOLVED, spotlight_seconds),
        ]
        events.extend(_after_resolution(state, definitions))
        return state, events

    outcome = record_miss(state, name)
    if outcome == OUTCOME_RETRY:
        errors = state.round.error_count
        return state, [guess_retry(name, errors, MAX_ERRORS - errors, retry_message(definitions, lang))]

    shown = display_name(name, lang, definitions)
    events = [
        country_revealed(name, shown, reveal_message(definitions, lang, shown)),
        result_spotlight(name, REVEALED, spotlight_seconds),
    ]
    events.extend(_after_resolution(state, definitions))
    return state, events


def _handle_restart(
    state: QuizState,
    definitions: QuizDefinitions,
    rng: random.Random | None,
) -> tuple[QuizState, list[GameEvent]]:
    reset_progress(state, new_order(len(state.countries), rng))
    return state, [quiz_restarted(len(state.countries)), _focus_event(state, definitions)]


def _handle_change_language(
    state: QuizState,
    action: Action,
    definitions: QuizDefinitions,
) -> tuple[QuizState, list[GameEvent]]:
    """Only the language changes; score, order and statuses are kept."""
    language = action.payload.get("language")
    if language not in definitions.languages:
        raise ValueError(f"Unknown language: {language}")
    old = state.language
    if language == old:
        return state, []
    state.language = language
    return state, [language_changed(old, language)]


def _handle_load_countries(
    state: QuizState,
    action: Action,
    definitions: QuizDefinitions,
    rng: random.Random | None,
) -> tuple[QuizState, list[GameEvent]]:
    """Install the country set and start a session; repeating the same set is a no-op."""
    countries: list[Country] = []
    seen: set[str] = set()
    for c in action.payload.get("countries") or []:
        if not isinstance(c, Country) or c.canonical_name in seen:
            continue
        seen.add(c.canonical_name)
        countries.append(c)

    if state.loaded and [c.canonical_name for c in state.countries] == [c.canonical_name for c in countries]:
        return state, []

    state.countries = countries
    state.loaded = True
    reset_progress(state, new_order(len(countries), rng))
    return state, [countries_loaded(len(countries)), _focus_event(state, definitions)]
