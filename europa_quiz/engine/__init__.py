"""
Europa Quiz Engine
Answer matching, scoring and progress tracking without web framework or UI
"""

# A country is revealed on the MAX_ERRORS-th wrong guess.
MAX_ERRORS = 4

# Points for a first-try answer; each wrong guess before it costs POINTS_PER_ERROR (floor 0).
POINTS_FIRST_TRY = 8
POINTS_PER_ERROR = 2

# Blank submissions cycle base -> base+1 -> base+2 -> base.
FOCUS_STEPS = 3

# How long a resolved country's result tooltip stays up on its own.
RESULT_SPOTLIGHT_SECONDS = 5.0
