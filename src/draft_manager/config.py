from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
PROCESSED_DATA_DIR = PROJECT_ROOT / "data" / "processed"
DRAFTS_DIR = PROJECT_ROOT / "data" / "drafts"

# Roster composition: per-category caps (also the final required split)
DEFAULT_MAX_PER_CATEGORY = {
    "male": 2,
    "female": 2,
}

# Rounds at or below this number are drafted without composition filtering
DEFAULT_EARLY_ROUNDS_THRESHOLD = 2

# Default league settings
DEFAULT_TOTAL_ROUNDS = 4
DEFAULT_MAX_PARTICIPANTS = 12
DEFAULT_SECONDS_PER_PICK = 120
DEFAULT_AUTO_PICK_ENABLED = True

# Bounds
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 20
MIN_ROUNDS = 1
MAX_ROUNDS = 10
MIN_RATING = 0.0
MAX_RATING = 100.0
