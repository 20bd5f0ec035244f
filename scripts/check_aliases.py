#!/usr/bin/env python3
"""
Check the alias tables: every allowed country needs at least one alias in every
language, and every alias must match itself after normalization.
Usage: python scripts/check_aliases.py [data_dir]
From repo root with PYTHONPATH=. (or after pip install -e .)
"""
import sys
import os

# Allow running from repo root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from europa_quiz.engine.definitions import load_definitions
from europa_quiz.engine.matcher import aliases_for, matches, normalize


def find_problems(definitions) -> list[str]:
    problems = []
    for code in sorted(definitions.languages):
        for name in sorted(definitions.allowed_countries):
            aliases = aliases_for(name, code, definitions)
            if not aliases:
                problems.append(f"{code}: no alias for {name}")
                continue
            for alias in aliases:
                if not normalize(alias):
                    problems.append(f"{code}: blank alias for {name}")
                elif not matches(name, alias, code, definitions):
                    problems.append(f"{code}: alias {alias!r} does not match {name}")
        table = definitions.alias_table(code)
        for name in sorted(set(table) - definitions.allowed_countries):
            problems.append(f"{code}: alias table lists {name}, which is not an allowed country")
    return problems


def main() -> None:
    data_dir = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        definitions = load_definitions(data_dir)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    problems = find_problems(definitions)
    for p in problems:
        print(p)
    if problems:
        print(f"{len(problems)} problem(s) found.", file=sys.stderr)
        sys.exit(1)
    print(f"OK: {len(definitions.allowed_countries)} countries x {len(definitions.languages)} languages.")


if __name__ == "__main__":
    main()
