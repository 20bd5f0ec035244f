"""
Scoring and attempt tracking.
Operates in place on a QuizState copy owned by the reducer.
"""

from europa_quiz.engine import MAX_ERRORS, POINTS_FIRST_TRY, POINTS_PER_ERROR
from europa_quiz.engine.state import QuizState, CountryStatus, ScoreState, RoundState, PENDING, SOLVED, REVEALED
from europa_quiz.engine.sequencer import advance

# Outcomes of a non-blank guess
OUTCOME_CORRECT = "correct"
OUTCOME_RETRY = "retry"
OUTCOME_REVEALED = "revealed"


def points_for_errors(error_count: int) -> int:
    """8, 6, 4, 2 for 0..3 errors; never negative."""
    return max(POINTS_FIRST_TRY - POINTS_PER_ERROR * error_count, 0)


def _resolve(state: QuizState, canonical_name: str, new_status: str, errors: int) -> None:
    """Move a country out of PENDING. Resolved statuses are terminal."""
    current = state.statuses.get(canonical_name)
    if current is not None and current.is_resolved:
        return
    state.statuses[canonical_name] = CountryStatus(state=new_status, errors_at_resolution=errors)


def _next_round(state: QuizState) -> None:
    state.round.error_count = 0
    state.round.current_position = advance(state.round.current_position)
    state.focus.step = 0


def record_correct(state: QuizState, canonical_name: str) -> int:
    """Apply a matching guess. Returns the points gained."""
    errors = state.round.error_count
    gained = points_for_errors(errors)
    state.score.total_score += gained
    state.score.correct_count += 1
    _resolve(state, canonical_name, SOLVED, errors)
    _next_round(state)
    return gained


def record_miss(state: QuizState, canonical_name: str) -> str:
    """
    Apply a wrong guess.
    Returns OUTCOME_RETRY while attempts remain, OUTCOME_REVEALED on the last one.
    """
    errors = state.round.error_count + 1
    if errors < MAX_ERRORS:
        state.round.error_count = errors
        return OUTCOME_RETRY
    state.score.incorrect_count += 1
    _resolve(state, canonical_name, REVEALED, errors)
    _next_round(state)
    return OUTCOME_REVEALED


def reset_progress(state: QuizState, order: list[int]) -> None:
    """Start a fresh session over the given round order."""
    state.order = list(order)
    state.round = RoundState()
    state.score = ScoreState()
    state.statuses = {c.canonical_name: CountryStatus(state=PENDING) for c in state.countries}
    state.focus.step = 0
