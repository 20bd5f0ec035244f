"""
Single place for default quiz/server configuration.
Values can be overridden with EUROPA_QUIZ_* environment variables.
"""

import os

# Answer language for new quizzes when no language or locale is given.
DEFAULT_LANGUAGE = os.environ.get("EUROPA_QUIZ_DEFAULT_LANGUAGE", "es")

# TopoJSON/GeoJSON of Europe: an http(s) URL or a local file path. Fetched once at startup.
GEOGRAPHY_SOURCE = os.environ.get(
    "EUROPA_QUIZ_GEOGRAPHY_SOURCE",
    "https://raw.githubusercontent.com/leakyMirror/map-of-europe/master/TopoJSON/europe.topojson",
)
GEOGRAPHY_TIMEOUT_SECONDS = float(os.environ.get("EUROPA_QUIZ_GEOGRAPHY_TIMEOUT", "20"))

# Set to "0" to skip the startup fetch (tests, offline development).
LOAD_GEOGRAPHY_ON_STARTUP = os.environ.get("EUROPA_QUIZ_LOAD_GEOGRAPHY", "1") != "0"

# How long a solved/revealed country's tooltip stays up.
RESULT_SPOTLIGHT_SECONDS = float(os.environ.get("EUROPA_QUIZ_SPOTLIGHT_SECONDS", "5"))

CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
