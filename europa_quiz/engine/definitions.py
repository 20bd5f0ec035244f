"""
Static definitions for languages, country aliases and map focus.
All quiz data lives under data/: languages.json, country_names.json, name_fixes.json,
countries.json and messages.json. Definitions are read once and never mutated.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

DATA_DIR = Path(__file__).parent.parent / "data"


def _default_language() -> str:
    """Single place for default: europa_quiz.config.DEFAULT_LANGUAGE."""
    from europa_quiz.config import DEFAULT_LANGUAGE
    return DEFAULT_LANGUAGE


def _freeze(value: Any) -> Any:
    """Recursively wrap dicts in read-only mappings and lists in tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of _freeze, for JSON output."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class LanguageDefinition:
    """A selectable answer language."""
    code: str  # e.g. "es", "val"
    label: str  # Native name shown in the selector
    flag: Optional[str] = None  # Flag image URL for the selector
    # Sibling language whose country names are reused (e.g. "val" -> "ca")
    alias_of: Optional[str] = None


@dataclass(frozen=True)
class QuizDefinitions:
    """Immutable quiz configuration."""
    languages: Mapping[str, LanguageDefinition]
    # language code -> canonical name -> accepted aliases (first one is the display form)
    country_names: Mapping[str, Mapping[str, tuple[str, ...]]]
    # Geography source name -> canonical name (e.g. "Holy See" -> "Vatican")
    name_fixes: Mapping[str, str]
    allowed_countries: frozenset[str]
    # canonical name -> base zoom level for countries too small at the default zoom
    zoom_levels: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    default_zoom: int = 1
    default_center: tuple[float, float] = (15.0, 50.0)
    # language code -> UI strings
    messages: Mapping[str, Mapping[str, Any]] = field(default_factory=lambda: MappingProxyType({}))

    def table_language(self, language: str) -> str:
        """Language whose alias table answers for `language` (follows alias_of)."""
        lang_def = self.languages.get(language)
        if lang_def is not None and lang_def.alias_of:
            return lang_def.alias_of
        return language

    def alias_table(self, language: str) -> Mapping[str, tuple[str, ...]]:
        """Country alias table for a language; empty if the language is unknown."""
        return self.country_names.get(self.table_language(language), MappingProxyType({}))

    def zoom_level(self, canonical_name: str) -> int:
        return self.zoom_levels.get(canonical_name, self.default_zoom)

    def messages_for(self, language: str) -> Mapping[str, Any]:
        """UI strings for a language, falling back to its sibling and then the default language."""
        for code in (language, self.table_language(language), _default_language()):
            if code in self.messages:
                return self.messages[code]
        return MappingProxyType({})

    def to_dict(self) -> dict[str, Any]:
        return {
            "languages": {
                code: {
                    "code": ld.code,
                    "label": ld.label,
                    "flag": ld.flag,
                    "alias_of": ld.alias_of,
                }
                for code, ld in self.languages.items()
            },
            "allowed_countries": sorted(self.allowed_countries),
            "zoom_levels": dict(self.zoom_levels),
            "default_zoom": self.default_zoom,
            "default_center": list(self.default_center),
        }


def _load_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_definitions(data_dir: Path | str | None = None) -> QuizDefinitions:
    """
    Load quiz definitions (languages, aliases, name fixes, countries, messages).

    Args:
        data_dir: Directory containing the JSON files. Defaults to the packaged data/.

    Raises:
        ValueError: if a language points at an unknown alias_of sibling
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    languages = {}
    for code, data in _load_json(data_dir / "languages.json").items():
        languages[code] = LanguageDefinition(
            code=data.get("code", code),
            label=data.get("label", code),
            flag=data.get("flag"),
            alias_of=data.get("alias_of"),
        )

    country_names_raw = _load_json(data_dir / "country_names.json")
    for code, ld in languages.items():
        # Only one hop: a sibling must own a real table
        if ld.alias_of is not None and ld.alias_of not in country_names_raw:
            raise ValueError(f"Language {code!r} reuses unknown language {ld.alias_of!r}")

    countries = _load_json(data_dir / "countries.json")
    name_fixes_path = data_dir / "name_fixes.json"
    name_fixes = _load_json(name_fixes_path) if name_fixes_path.exists() else {}
    messages_path = data_dir / "messages.json"
    messages = _load_json(messages_path) if messages_path.exists() else {}

    center = countries.get("default_center") or [15, 50]
    return QuizDefinitions(
        languages=MappingProxyType(languages),
        country_names=_freeze({
            code: {name: list(aliases) for name, aliases in table.items()}
            for code, table in country_names_raw.items()
        }),
        name_fixes=_freeze(name_fixes),
        allowed_countries=frozenset(countries.get("allowed", [])),
        zoom_levels=_freeze({k: int(v) for k, v in (countries.get("zoom_levels") or {}).items()}),
        default_zoom=int(countries.get("default_zoom", 1)),
        default_center=(float(center[0]), float(center[1])),
        messages=_freeze(messages),
    )


def messages_to_dict(definitions: QuizDefinitions, language: str) -> dict[str, Any]:
    """Plain-dict copy of a language's UI strings, for JSON responses."""
    return _thaw(definitions.messages_for(language))
