from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Player pool CSV file name pattern (use .format(season=YYYY))
FILE_PATTERNS = {
    "players": "players_{season}.csv",
}

# Accepted header spellings -> canonical column name
COLUMN_ALIASES = {
    "id": "ID",
    "player_id": "ID",
    "name": "Name",
    "player": "Name",
    "player name": "Name",
    "sex": "Sex",
    "gender": "Sex",
    "rating": "Rating",
    "active": "Active",
    "status": "Active",
}

REQUIRED_COLUMNS = ["Name", "Sex"]

# Sex tag spellings -> canonical category
SEX_ALIASES = {
    "m": "male",
    "male": "male",
    "man": "male",
    "men": "male",
    "mens": "male",
    "f": "female",
    "w": "female",
    "female": "female",
    "woman": "female",
    "women": "female",
    "womens": "female",
    "ladies": "female",
}

ACTIVE_VALUES = {"1", "y", "yes", "true", "active"}
INACTIVE_VALUES = {"0", "n", "no", "false", "inactive", "retired"}

# Player ratings live on a 0-100 scale
RATING_RANGE = (0.0, 100.0)
