"""
End-to-end quiz flow through apply_action: guesses, reveal, blank-input zoom,
restart, language switching and the no-target guard.
"""

import random

import pytest

from europa_quiz.engine.actions import submit_guess, restart, change_language, load_countries, Action
from europa_quiz.engine.reducer import apply_action
from europa_quiz.engine.state import QuizState, PENDING, SOLVED, REVEALED
from europa_quiz.engine.events import (
    GUESS_CORRECT,
    GUESS_RETRY,
    COUNTRY_REVEALED,
    FOCUS_CHANGED,
    RESULT_SPOTLIGHT,
    QUIZ_COMPLETED,
    QUIZ_RESTARTED,
    LANGUAGE_CHANGED,
    COUNTRIES_LOADED,
    MESSAGE_EVENT_TYPES,
)
from europa_quiz.engine.utils import initialize_quiz_state
from conftest import make_countries


def event_types(events):
    return [e.type for e in events]


def test_wrong_then_right_in_spanish(make_state, definitions):
    state = make_state("France", "Germany")
    assert state.current_country().canonical_name == "France"

    state, events = apply_action(state, submit_guess("alemania"), definitions)
    assert event_types(events) == [GUESS_RETRY]
    assert events[0].payload["attempts_left"] == 3
    assert events[0].payload["message"] == "No es correcto. ¡Inténtalo de nuevo!"
    assert state.round.error_count == 1
    assert state.round.current_position == 0
    assert state.statuses["France"].state == PENDING

    state, events = apply_action(state, submit_guess("Francia"), definitions)
    assert event_types(events) == [GUESS_CORRECT, RESULT_SPOTLIGHT, FOCUS_CHANGED]
    assert events[0].payload["points_gained"] == 6
    assert events[0].payload["message"] == "¡Correcto! +6 puntos"
    assert events[1].payload == {"country": "France", "state": SOLVED, "duration_seconds": 5.0}
    assert events[2].payload["country"] == "Germany"
    assert state.score.total_score == 6
    assert state.score.correct_count == 1
    assert state.statuses["France"].state == SOLVED
    assert state.statuses["France"].errors_at_resolution == 1
    assert state.round.current_position == 1
    assert state.round.error_count == 0


def test_four_misses_reveal(make_state, definitions):
    state = make_state("France", "Germany")
    for _ in range(3):
        state, events = apply_action(state, submit_guess("italia"), definitions)
        assert event_types(events) == [GUESS_RETRY]

    state, events = apply_action(state, submit_guess("italia"), definitions)
    assert event_types(events) == [COUNTRY_REVEALED, RESULT_SPOTLIGHT, FOCUS_CHANGED]
    revealed = events[0].payload
    assert revealed["canonical_name"] == "France"
    assert revealed["display_name"] == "Francia"
    assert "Francia" in revealed["message"]
    assert state.statuses["France"].state == REVEALED
    assert state.statuses["France"].errors_at_resolution == 4
    assert state.score.incorrect_count == 1
    assert state.score.total_score == 0
    assert state.round.current_position == 1


def test_exactly_one_message_event_per_guess(make_state, definitions):
    state = make_state("France", "Germany")
    for guess in ("x", "y", "Francia", "z"):
        state, events = apply_action(state, submit_guess(guess), definitions)
        assert sum(1 for e in events if e.type in MESSAGE_EVENT_TYPES) == 1


def test_blank_guess_never_scores(make_state, definitions):
    state = make_state("France", "Germany")
    state, _ = apply_action(state, submit_guess("italia"), definitions)
    before = (state.score.to_dict(), state.round.to_dict(), {k: v.to_dict() for k, v in state.statuses.items()})

    for raw in ["", "   ", "\t", "", ""]:
        state, events = apply_action(state, submit_guess(raw), definitions)
        assert event_types(events) == [FOCUS_CHANGED]

    after = (state.score.to_dict(), state.round.to_dict(), {k: v.to_dict() for k, v in state.statuses.items()})
    assert before == after


def test_blank_guess_cycles_zoom(make_state, definitions):
    state = make_state("France")
    anchor = [2.5, 46.6]

    state, events = apply_action(state, submit_guess(""), definitions)
    assert events[0].payload["zoom"] == 2
    assert events[0].payload["center"] == anchor
    state, events = apply_action(state, submit_guess(""), definitions)
    assert events[0].payload["zoom"] == 3
    state, events = apply_action(state, submit_guess(""), definitions)
    assert events[0].payload["zoom"] == 1
    # Back at base zoom a normal-sized country shows the whole map
    assert events[0].payload["center"] == [15.0, 50.0]


def test_blank_guess_zoom_is_relative_to_country_base(make_state, definitions):
    state = make_state("Monaco")
    zooms = []
    for _ in range(3):
        state, events = apply_action(state, submit_guess(" "), definitions)
        zooms.append(events[0].payload["zoom"])
    assert zooms == [7, 8, 6]
    # Small countries stay centered on themselves at base zoom
    assert events[0].payload["center"] == [7.42, 43.74]


def test_focus_resets_for_next_country(make_state, definitions):
    state = make_state("France", "Vatican")
    state, _ = apply_action(state, submit_guess(""), definitions)
    assert state.focus.step == 1
    state, events = apply_action(state, submit_guess("francia"), definitions)
    focus = events[-1].payload
    assert focus["country"] == "Vatican"
    assert focus["zoom"] == 4
    assert focus["step"] == 0
    assert state.focus.step == 0


def test_resolved_country_status_is_terminal(make_state, definitions):
    state = make_state("France", "Germany")
    state, _ = apply_action(state, submit_guess("francia"), definitions)
    solved = state.statuses["France"].to_dict()

    for guess in ("francia", "francia", "x", "x", "x", "x", "francia"):
        state, _ = apply_action(state, submit_guess(guess), definitions)
        assert state.statuses["France"].to_dict() == solved


def test_session_completes_and_further_guesses_are_ignored(make_state, definitions):
    state = make_state("France")
    state, events = apply_action(state, submit_guess("francia"), definitions)
    assert event_types(events) == [GUESS_CORRECT, RESULT_SPOTLIGHT, QUIZ_COMPLETED]
    assert events[-1].payload == {"total_score": 8, "correct_count": 1, "incorrect_count": 0}
    assert state.current_country() is None

    new_state, events = apply_action(state, submit_guess("francia"), definitions)
    assert events == []
    assert new_state.to_dict() == state.to_dict()


def test_guess_before_countries_load_is_a_no_op(definitions):
    state = initialize_quiz_state(definitions, language="es")
    assert not state.loaded
    new_state, events = apply_action(state, submit_guess("francia"), definitions)
    assert events == []
    assert new_state.to_dict() == state.to_dict()


def test_load_countries_starts_session_once(definitions):
    state = initialize_quiz_state(definitions, language="es")
    countries = make_countries("France", "Germany", "France")
    state, events = apply_action(state, load_countries(countries), definitions, rng=random.Random(1))
    assert event_types(events) == [COUNTRIES_LOADED, FOCUS_CHANGED]
    assert events[0].payload["count"] == 2
    assert sorted(state.order) == [0, 1]
    assert set(state.statuses) == {"France", "Germany"}

    state, _ = apply_action(state, submit_guess("x"), definitions)
    again, events = apply_action(state, load_countries(countries), definitions)
    assert events == []
    assert again.round.error_count == 1


def test_restart_resets_everything(make_state, definitions):
    state = make_state("France", "Germany", "Spain")
    for guess in ("francia", "x", "x", "x", "x", "y"):
        state, _ = apply_action(state, submit_guess(guess), definitions)
    assert state.score.total_score == 8

    state, events = apply_action(state, restart(), definitions, rng=random.Random(5))
    assert event_types(events) == [QUIZ_RESTARTED, FOCUS_CHANGED]
    assert state.score.total_score == 0
    assert state.score.correct_count == 0
    assert state.score.incorrect_count == 0
    assert state.round.current_position == 0
    assert state.round.error_count == 0
    assert sorted(state.order) == [0, 1, 2]
    assert all(state.status_of(c.canonical_name).state == PENDING for c in state.countries)


def test_language_change_keeps_progress(make_state, definitions):
    state = make_state("France", "Germany")
    state, _ = apply_action(state, submit_guess("francia"), definitions)
    state, _ = apply_action(state, submit_guess("x"), definitions)

    state, events = apply_action(state, change_language("ca"), definitions)
    assert event_types(events) == [LANGUAGE_CHANGED]
    assert state.language == "ca"
    assert state.score.total_score == 8
    assert state.round.error_count == 1

    # Spanish answer no longer accepted, Catalan one is
    state, events = apply_action(state, submit_guess("alemania"), definitions)
    assert events[0].type == GUESS_RETRY
    state, events = apply_action(state, submit_guess("alemanya"), definitions)
    assert events[0].type == GUESS_CORRECT
    assert events[0].payload["points_gained"] == 4
    assert events[0].payload["message"] == "Correcte! +4 punts"


def test_language_change_same_language_has_no_events(make_state, definitions):
    state = make_state("France")
    _, events = apply_action(state, change_language("es"), definitions)
    assert events == []


def test_unknown_language_rejected(make_state, definitions):
    state = make_state("France")
    with pytest.raises(ValueError):
        apply_action(state, change_language("klingon"), definitions)


def test_unknown_action_rejected(make_state, definitions):
    state = make_state("France")
    with pytest.raises(ValueError):
        apply_action(state, Action(type="skip_country", payload={}), definitions)


def test_apply_action_does_not_mutate_input(make_state, definitions):
    state = make_state("France", "Germany")
    snapshot = state.to_dict()
    apply_action(state, submit_guess("francia"), definitions)
    assert state.to_dict() == snapshot


def test_state_round_trips_through_json(make_state, definitions):
    state = make_state("France", "Germany")
    state, _ = apply_action(state, submit_guess("francia"), definitions)
    restored = QuizState.from_json(state.to_json())
    assert restored.to_dict() == state.to_dict()
