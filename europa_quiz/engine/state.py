"""
Quiz state representation.
The reducer never mutates its input; it works on a copy and returns it.
Includes JSON serialization so a session can be handed to a client or cached.
"""

import json
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

# Country status values
PENDING = "pending"
SOLVED = "solved"
REVEALED = "revealed"
COUNTRY_STATES = (PENDING, SOLVED, REVEALED)


def _int(v: Any, default: int) -> int:
    try:
        return int(v) if v is not None else default
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Country:
    """A selectable country, built once from the geography source."""
    id: str  # Feature id from the geography source (falls back to the canonical name)
    canonical_name: str  # e.g. "Vatican", "SanMarino", "United Kingdom"
    anchor_point: tuple[float, float]  # (lon, lat) used for focus and tooltips

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "canonical_name": self.canonical_name,
            "anchor_point": list(self.anchor_point),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Country":
        if not isinstance(data, dict):
            data = {}
        name = str(data.get("canonical_name") or "")
        anchor = data.get("anchor_point")
        if not isinstance(anchor, (list, tuple)) or len(anchor) != 2:
            anchor = (0.0, 0.0)
        return cls(
            id=str(data.get("id") or name),
            canonical_name=name,
            anchor_point=(float(anchor[0]), float(anchor[1])),
        )


@dataclass
class CountryStatus:
    """Per-country progress. Leaves PENDING at most once per session."""
    state: str = PENDING  # "pending", "solved" or "revealed"
    errors_at_resolution: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.state != PENDING

    def to_dict(self) -> dict[str, Any]:
        return {"state": self.state, "errors_at_resolution": self.errors_at_resolution}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CountryStatus":
        if not isinstance(data, dict):
            data = {}
        st = data.get("state")
        return cls(
            state=st if st in COUNTRY_STATES else PENDING,
            errors_at_resolution=max(0, _int(data.get("errors_at_resolution"), 0)),
        )


@dataclass
class ScoreState:
    total_score: int = 0
    correct_count: int = 0
    incorrect_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_score": self.total_score,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoreState":
        if not isinstance(data, dict):
            data = {}
        return cls(
            total_score=max(0, _int(data.get("total_score"), 0)),
            correct_count=max(0, _int(data.get("correct_count"), 0)),
            incorrect_count=max(0, _int(data.get("incorrect_count"), 0)),
        )


@dataclass
class RoundState:
    """Position in the round order and wrong guesses on the active country."""
    current_position: int = 0
    error_count: int = 0  # 0..MAX_ERRORS; reset whenever the active country changes

    def to_dict(self) -> dict[str, Any]:
        return {"current_position": self.current_position, "error_count": self.error_count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoundState":
        if not isinstance(data, dict):
            data = {}
        return cls(
            current_position=max(0, _int(data.get("current_position"), 0)),
            error_count=max(0, _int(data.get("error_count"), 0)),
        )


@dataclass
class ViewFocus:
    """
    Presentation hint for the map: how many blank submissions deep the zoom is
    on the active country (0 = its base zoom). Never read by scoring.
    """
    step: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"step": self.step}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViewFocus":
        if not isinstance(data, dict):
            data = {}
        return cls(step=max(0, _int(data.get("step"), 0)))


@dataclass
class QuizState:
    """Complete quiz session state."""
    language: str
    # Empty until the geography source has loaded
    countries: list[Country] = field(default_factory=list)
    # Permutation of indices into countries
    order: list[int] = field(default_factory=list)
    round: RoundState = field(default_factory=RoundState)
    score: ScoreState = field(default_factory=ScoreState)
    # canonical name -> CountryStatus
    statuses: dict[str, CountryStatus] = field(default_factory=dict)
    focus: ViewFocus = field(default_factory=ViewFocus)
    # False until countries have been loaded; submissions are ignored meanwhile
    loaded: bool = False

    def copy(self) -> "QuizState":
        """Return a deep copy of this quiz state."""
        return deepcopy(self)

    def current_country(self) -> Country | None:
        """The targeted country, or None when not loaded or the session is complete."""
        if not self.loaded or self.round.current_position >= len(self.order):
            return None
        index = self.order[self.round.current_position]
        if not 0 <= index < len(self.countries):
            return None
        return self.countries[index]

    def status_of(self, canonical_name: str) -> CountryStatus:
        return self.statuses.get(canonical_name) or CountryStatus()

    # ===== Serialization Methods =====

    def to_dict(self) -> dict[str, Any]:
        """Convert QuizState to a dictionary for JSON serialization."""
        return {
            "language": self.language,
            "countries": [c.to_dict() for c in self.countries],
            "order": self.order,
            "round": self.round.to_dict(),
            "score": self.score.to_dict(),
            "statuses": {name: st.to_dict() for name, st in self.statuses.items()},
            "focus": self.focus.to_dict(),
            "loaded": self.loaded,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizState":
        """Create QuizState from a dictionary (tolerates missing or malformed fields)."""
        if not isinstance(data, dict):
            data = {}
        countries_raw = data.get("countries")
        if not isinstance(countries_raw, list):
            countries_raw = []
        countries = [Country.from_dict(c) for c in countries_raw if isinstance(c, dict)]
        order_raw = data.get("order")
        if not isinstance(order_raw, list):
            order_raw = []
        statuses_raw = data.get("statuses")
        if not isinstance(statuses_raw, dict):
            statuses_raw = {}
        return cls(
            language=str(data.get("language") or ""),
            countries=countries,
            order=[_int(i, 0) for i in order_raw],
            round=RoundState.from_dict(data.get("round")),
            score=ScoreState.from_dict(data.get("score")),
            statuses={
                str(name): CountryStatus.from_dict(st)
                for name, st in statuses_raw.items()
            },
            focus=ViewFocus.from_dict(data.get("focus")),
            loaded=bool(data.get("loaded", False)),
        )

    def to_json(self, indent: int = 2) -> str:
        """Serialize QuizState to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_json(cls, json_str: str) -> "QuizState":
        """Deserialize QuizState from a JSON string."""
        return cls.from_dict(json.loads(json_str))
