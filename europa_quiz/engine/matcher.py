"""
Free-text answer matching against per-language country aliases.
Pure functions; no state and no rendering context needed.
"""

import re
import unicodedata

from europa_quiz.engine.definitions import QuizDefinitions

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Lowercase, strip diacritics, collapse whitespace runs and trim."""
    lowered = (text or "").lower()
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE.sub(" ", stripped).strip()


def resolve_canonical_name(name: str, definitions: QuizDefinitions) -> str:
    """Map a geography-source name to the quiz's canonical identifier."""
    return definitions.name_fixes.get(name, name)


def aliases_for(canonical_name: str, language: str, definitions: QuizDefinitions) -> tuple[str, ...]:
    """Accepted aliases for a country in a language; empty when unknown."""
    fixed = resolve_canonical_name(canonical_name, definitions)
    return definitions.alias_table(language).get(fixed, ())


def matches(
    canonical_name: str,
    user_text: str,
    language: str,
    definitions: QuizDefinitions,
) -> bool:
    """
    True iff the normalized input equals the normalized form of any alias
    of the country in the given language. Exact match only.
    """
    candidate = normalize(user_text)
    return any(normalize(alias) == candidate for alias in aliases_for(canonical_name, language, definitions))


def _title_case(text: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in text.split(" "))


def display_name(canonical_name: str, language: str, definitions: QuizDefinitions) -> str:
    """Localized display form (first alias, title-cased); the canonical name if there is none."""
    aliases = aliases_for(canonical_name, language, definitions)
    if aliases:
        return _title_case(aliases[0])
    return resolve_canonical_name(canonical_name, definitions)
