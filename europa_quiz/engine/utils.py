"""
Utility functions for the quiz engine.
"""

import random
from collections import Counter

from europa_quiz.engine.state import QuizState, Country
from europa_quiz.engine.definitions import QuizDefinitions, _default_language
from europa_quiz.engine.matcher import display_name
from europa_quiz.engine.actions import load_countries
from europa_quiz.engine.reducer import apply_action


def initialize_quiz_state(
    definitions: QuizDefinitions,
    language: str | None = None,
    countries: list[Country] | None = None,
    rng: random.Random | None = None,
) -> QuizState:
    """
    Create a quiz session.

    Args:
        definitions: Quiz definitions
        language: Answer language; unknown or missing codes use the default language
        countries: Countries from the geography source. None leaves the quiz
            unloaded (no target, guesses ignored) until load_countries is applied.
        rng: Random source for the first shuffle
    """
    if language not in definitions.languages:
        language = _default_language()
    state = QuizState(language=language)
    if countries is not None:
        state, _ = apply_action(state, load_countries(countries), definitions, rng=rng)
    return state


def print_quiz_state(state: QuizState, definitions: QuizDefinitions, verbose: bool = False):
    """
    Pretty-print the current quiz state.

    Args:
        state: Current quiz state
        definitions: Quiz definitions
        verbose: If True, list every country with its status
    """
    current = state.current_country()
    print(f"\n{'='*60}")
    if not state.loaded:
        print(f"Language: {state.language} | Waiting for geography data")
    else:
        target = current.canonical_name if current else "-"
        print(
            f"Language: {state.language} | Round {state.round.current_position + 1}/{len(state.order)} "
            f"| Target: {target} | Errors: {state.round.error_count}")
    print(f"{'='*60}")
    print(f"Score: {state.score.total_score} | Correct: {state.score.correct_count} "
          f"| Incorrect: {state.score.incorrect_count}")

    counts = Counter(state.status_of(c.canonical_name).state for c in state.countries)
    print(f"Statuses: {dict(sorted(counts.items()))}")

    if verbose:
        for c in state.countries:
            st = state.status_of(c.canonical_name)
            shown = display_name(c.canonical_name, state.language, definitions)
            print(f"  - {c.canonical_name} ({shown}): {st.state}, errors={st.errors_at_resolution}")
    print()
