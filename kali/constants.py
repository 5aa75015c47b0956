"""Constants for Kali."""

# Question types with evaluation semantics
QUESTION_MULTIPLE_CHOICE = "multiple-choice"
QUESTION_TRUE_FALSE = "true-false"
QUESTION_FILL_BLANK = "fill-blank"
QUESTION_EXPLANATION = "explanation"

# Declared in the catalog format but not graded
QUESTION_MATCH_PAIRS = "match-pairs"
QUESTION_TRANSLATE = "translate"
QUESTION_SPEAK = "speak"
QUESTION_LISTEN = "listen"

# Typo tolerance for fill-blank answers
TYPO_RATIO = 0.2
TYPO_MIN_DISTANCE = 1

# Star thresholds (score percentage, evaluated high to low)
STARS_THREE_PERCENT = 90
STARS_TWO_PERCENT = 70
STARS_ONE_PERCENT = 50
MAX_STARS = 3

# Lesson attempts
SESSION_TIMEOUT_MINUTES = 60

# Lesson status strings
STATUS_LOCKED = "locked"
STATUS_AVAILABLE = "available"
STATUS_COMPLETED = "completed"

# Difficulty levels
DIFFICULTY_LEVELS = ("beginner", "intermediate", "advanced")

# Remote catalog fetching
CATALOG_FETCH_TIMEOUT = 30
CATALOG_FETCH_RETRIES = 3
