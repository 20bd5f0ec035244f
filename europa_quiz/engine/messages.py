"""
Localized user-facing strings.
"""

from europa_quiz.engine.definitions import QuizDefinitions


def _template(definitions: QuizDefinitions, language: str, key: str, fallback: str) -> str:
    value = definitions.messages_for(language).get(key)
    return value if isinstance(value, str) else fallback


def correct_message(definitions: QuizDefinitions, language: str, points: int) -> str:
    return _template(definitions, language, "correct", "+{points}").format(points=points)


def reveal_message(definitions: QuizDefinitions, language: str, name: str) -> str:
    return _template(definitions, language, "reveal", "{name}").format(name=name)


def retry_message(definitions: QuizDefinitions, language: str) -> str:
    return _template(definitions, language, "try_again", "")


def language_label(definitions: QuizDefinitions, code: str, ui_language: str) -> str:
    """Name of language `code` as written in `ui_language`; the code itself if missing."""
    labels = definitions.messages_for(ui_language).get("languages") or {}
    return labels.get(code, code)


def language_from_locale(locale: str | None, definitions: QuizDefinitions, default: str = "es") -> str:
    """
    Pick a starting language from a browser locale or Accept-Language value.
    "ca-ES-valencia" -> val, "ca*" -> ca, "eu*", "gl*", "oc*"; anything else -> default.
    """
    tag = (locale or "").split(",")[0].strip().lower()
    if "valenc" in tag and "val" in definitions.languages:
        return "val"
    for code in ("ca", "eu", "gl", "oc"):
        if tag.startswith(code) and code in definitions.languages:
            return code
    return default
