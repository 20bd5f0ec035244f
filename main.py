"""
Main entry point for the Europa Quiz engine.
Demonstrates core functionality with a simple simulated session.
"""

import random

from europa_quiz.engine.definitions import load_definitions
from europa_quiz.engine.state import Country
from europa_quiz.engine.actions import submit_guess, change_language, restart
from europa_quiz.engine.reducer import apply_action
from europa_quiz.engine.matcher import aliases_for
from europa_quiz.engine.utils import initialize_quiz_state, print_quiz_state


# A handful of countries with approximate anchor points, standing in for the geography source
DEMO_COUNTRIES = [
    Country(id="FR", canonical_name="France", anchor_point=(2.5, 46.6)),
    Country(id="DE", canonical_name="Germany", anchor_point=(10.4, 51.1)),
    Country(id="VA", canonical_name="Vatican", anchor_point=(12.45, 41.9)),
    Country(id="PT", canonical_name="Portugal", anchor_point=(-8.2, 39.6)),
]


def print_events(events):
    for event in events:
        print(f"  [{event.type}] {event.payload}")


def main():
    print("=" * 60)
    print("EUROPA QUIZ: simulated session")
    print("=" * 60)

    definitions = load_definitions()
    rng = random.Random(7)
    state = initialize_quiz_state(definitions, language="es", countries=DEMO_COUNTRIES, rng=rng)
    print_quiz_state(state, definitions)

    # Blank submission: zoom in, does not count as an attempt
    print("\n> (blank)")
    state, events = apply_action(state, submit_guess("   "), definitions)
    print_events(events)

    # One wrong answer, then the right one
    target = state.current_country().canonical_name
    print(f"\n> 'atlantida' (target is {target})")
    state, events = apply_action(state, submit_guess("atlantida"), definitions)
    print_events(events)
    answer = aliases_for(target, state.language, definitions)[0]
    print(f"\n> '{answer.upper()}'")
    state, events = apply_action(state, submit_guess(answer.upper()), definitions)
    print_events(events)

    # Switch to Catalan and exhaust the next country
    print("\n> language -> ca")
    state, events = apply_action(state, change_language("ca"), definitions)
    print_events(events)
    for _ in range(4):
        state, events = apply_action(state, submit_guess("xyz"), definitions)
        print_events(events)

    print_quiz_state(state, definitions, verbose=True)

    print("\n> restart")
    state, events = apply_action(state, restart(), definitions, rng=rng)
    print_events(events)
    print_quiz_state(state, definitions)


if __name__ == "__main__":
    main()
