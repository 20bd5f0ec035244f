"""
FastAPI backend for Europa Quiz.
Provides REST API endpoints for quiz sessions and guesses.
Sessions live in memory only; nothing is persisted between server runs.
"""

import threading
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from europa_quiz.config import (
    CORS_ORIGINS,
    DEFAULT_LANGUAGE,
    GEOGRAPHY_SOURCE,
    GEOGRAPHY_TIMEOUT_SECONDS,
    LOAD_GEOGRAPHY_ON_STARTUP,
    RESULT_SPOTLIGHT_SECONDS,
)
from europa_quiz.engine.state import QuizState, Country
from europa_quiz.engine.actions import (
    Action,
    submit_guess,
    restart,
    change_language,
    load_countries,
)
from europa_quiz.engine.reducer import apply_action
from europa_quiz.engine.definitions import load_definitions, messages_to_dict
from europa_quiz.engine.geography import GeographyLoadError, load_countries as load_geography_countries
from europa_quiz.engine.messages import language_from_locale, language_label
from europa_quiz.engine.queries import validate_action, get_quiz_summary, get_map_view
from europa_quiz.engine.spotlight import SpotlightTracker
from europa_quiz.engine.utils import initialize_quiz_state

app = FastAPI(
    title="Europa Quiz API",
    description="Backend API for Europa Quiz - name the highlighted European country",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers so the frontend can read the error."""
    import traceback
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


definitions = load_definitions()

# In-memory quiz sessions; quiz_id -> state
quizzes: dict[str, QuizState] = {}

# quiz_id -> result tooltip timer
spotlights: dict[str, SpotlightTracker] = {}

# Countries from the geography source; None until the one-time load succeeds
countries: list[Country] | None = None
geography_error: str | None = None

# Guards quizzes/countries against the background geography load
_lock = threading.RLock()


# ===== Pydantic Models =====

class CreateQuizRequest(BaseModel):
    language: str | None = None
    # Browser locale (e.g. "ca-ES-valencia"); used when language is omitted
    locale: str | None = None


class GuessRequest(BaseModel):
    guess: str = ""


class LanguageRequest(BaseModel):
    language: str


# ===== Helper Functions =====

def set_countries(loaded: list[Country]) -> None:
    """Install the country set and hand it to every quiz still waiting for it."""
    global countries, geography_error
    with _lock:
        countries = list(loaded)
        geography_error = None
        for quiz_id, state in list(quizzes.items()):
            if not state.loaded:
                quizzes[quiz_id], _ = apply_action(state, load_countries(countries), definitions)


def load_geography(source: str = GEOGRAPHY_SOURCE) -> bool:
    """Fetch the geography source once. On failure quizzes stay without a target."""
    global geography_error
    try:
        loaded = load_geography_countries(source, definitions, timeout=GEOGRAPHY_TIMEOUT_SECONDS)
    except GeographyLoadError as e:
        with _lock:
            geography_error = str(e)
        print(f"[geography] {e}", flush=True)
        return False
    set_countries(loaded)
    print(f"[geography] loaded {len(loaded)} countries from {source}", flush=True)
    return True


def get_quiz(quiz_id: str) -> QuizState:
    """Get quiz state; raise 404 if not found."""
    state = quizzes.get(quiz_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Quiz {quiz_id} not found")
    return state


def state_for_response(quiz_id: str, state: QuizState) -> dict[str, Any]:
    """Summary, map view and spotlight for the UI."""
    tracker = spotlights.get(quiz_id)
    return {
        "summary": get_quiz_summary(state),
        "map": get_map_view(state, definitions),
        "spotlight": tracker.country if tracker else None,
    }


def run_action(quiz_id: str, action: Action) -> dict[str, Any]:
    """Validate, apply and store an action; return new state and events."""
    with _lock:
        state = get_quiz(quiz_id)
        validation = validate_action(state, action, definitions)
        if not validation.valid:
            raise HTTPException(status_code=400, detail=validation.error)
        try:
            new_state, events = apply_action(
                state, action, definitions, spotlight_seconds=RESULT_SPOTLIGHT_SECONDS
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        quizzes[quiz_id] = new_state
        spotlights.setdefault(quiz_id, SpotlightTracker()).handle_events(events)
        return {
            "quiz_id": quiz_id,
            "state": state_for_response(quiz_id, new_state),
            "events": [e.to_dict() for e in events],
        }


@app.on_event("startup")
def on_startup():
    if LOAD_GEOGRAPHY_ON_STARTUP:
        threading.Thread(target=load_geography, daemon=True).start()


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Europa Quiz API", "version": "1.0.0"}


@app.get("/languages")
def get_languages(lang: str = DEFAULT_LANGUAGE):
    """Selectable languages, labelled in `lang`, plus that language's UI strings."""
    return {
        "languages": [
            {
                "code": code,
                "label": language_label(definitions, code, lang),
                "native_label": ld.label,
                "flag": ld.flag,
            }
            for code, ld in definitions.languages.items()
        ],
        "messages": messages_to_dict(definitions, lang),
    }


@app.get("/definitions")
def get_definitions():
    """Static quiz definitions (languages, allowed countries, zoom levels)."""
    return definitions.to_dict()


@app.get("/geography")
def get_geography_status():
    with _lock:
        return {
            "loaded": countries is not None,
            "count": len(countries) if countries is not None else 0,
            "error": geography_error,
            "source": GEOGRAPHY_SOURCE,
        }


@app.post("/geography/reload")
def reload_geography():
    """Retry the geography load (e.g. after a network failure at startup)."""
    ok = load_geography()
    status = get_geography_status()
    if not ok:
        raise HTTPException(status_code=503, detail=status["error"])
    return status


@app.post("/quizzes")
def create_quiz(request: CreateQuizRequest):
    """Start a quiz. Without geography data yet it waits with no target country."""
    language = request.language
    if language is None:
        language = language_from_locale(request.locale, definitions, default=DEFAULT_LANGUAGE)
    if language not in definitions.languages:
        raise HTTPException(status_code=400, detail=f"Unknown language: {language}")
    quiz_id = str(uuid.uuid4())
    with _lock:
        state = initialize_quiz_state(definitions, language=language, countries=countries)
        quizzes[quiz_id] = state
        spotlights[quiz_id] = SpotlightTracker()
        return {"quiz_id": quiz_id, "state": state_for_response(quiz_id, state)}


@app.get("/quizzes/{quiz_id}")
def get_quiz_state(quiz_id: str):
    with _lock:
        state = get_quiz(quiz_id)
        return {"quiz_id": quiz_id, "state": state_for_response(quiz_id, state)}


@app.post("/quizzes/{quiz_id}/guess")
def do_guess(quiz_id: str, request: GuessRequest):
    """Submit a guess for the highlighted country. Blank guesses zoom instead."""
    return run_action(quiz_id, submit_guess(request.guess))


@app.post("/quizzes/{quiz_id}/restart")
def do_restart(quiz_id: str):
    return run_action(quiz_id, restart())


@app.post("/quizzes/{quiz_id}/language")
def do_change_language(quiz_id: str, request: LanguageRequest):
    """Switch language mid-quiz; score and progress are kept."""
    return run_action(quiz_id, change_language(request.language))


@app.delete("/quizzes/{quiz_id}")
def delete_quiz(quiz_id: str):
    with _lock:
        get_quiz(quiz_id)
        del quizzes[quiz_id]
        tracker = spotlights.pop(quiz_id, None)
    if tracker:
        tracker.clear()
    return {"deleted": quiz_id}
