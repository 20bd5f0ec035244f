"""
Development server for the Europa Quiz API.
Fetches the geography source on startup (set EUROPA_QUIZ_LOAD_GEOGRAPHY=0 to skip).
"""

import os

import uvicorn

PORT = int(os.environ.get("PORT", "8000"))

if __name__ == "__main__":
    print(f"Serving at http://localhost:{PORT}")
    print(f"API docs at http://localhost:{PORT}/docs")
    uvicorn.run("europa_quiz.api.main:app", host="0.0.0.0", port=PORT, reload=False)
