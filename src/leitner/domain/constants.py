"""Centralized constants for the Leitner scheduler.

Policy numbers and seed data live here so every layer imports from a
single source of truth.
"""

# ---------- Buckets ----------
MIN_BUCKET = 0
MAX_BUCKET = 4  # Easy answers never promote a card past this tier

# ---------- Progress weights ----------
# Wrong answers carry no weight and are excluded from the success rate.
EASY_WEIGHT = 1
HARD_WEIGHT = 2
SUCCESS_RATE_PLACES = 2

# ---------- Server ----------
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001

# ---------- Seed deck ----------
# (front, back, hint, tags)
DEMO_CARDS = [
    ("What is the capital of France?", "Paris", "European city", ["geography"]),
    ("2 + 2", "4", "Simple math", ["math"]),
    ("Who wrote Hamlet?", "William Shakespeare", "Famous playwright", ["literature"]),
    ("Water freezes at what temperature (°C)?", "0", "Science fact", ["science"]),
]
