"""
Configuration constants for harvesting and classifying start.gg results.

This module centralizes the upstream URLs, eligibility codes and default
pacing parameters used by the scraping and aggregation layers so they stay
consistent and easy to tune.
"""

# =============================================================================
# Upstream API
# =============================================================================

STARTGG_API_BASE_URL = "https://api.start.gg"
STARTGG_GQL_URL = f"{STARTGG_API_BASE_URL}/gql/alpha"

# Raw tournament slugs come back as "tournament/<slug>"
TOURNAMENT_SLUG_PREFIX_LENGTH: int = 11

# Super Smash Bros. Melee
TRACKED_VIDEOGAME_ID: int = 1

# =============================================================================
# Pacing and retries
# =============================================================================

DEFAULT_PAGE_SIZE: int = 512
DEFAULT_PAGE_DELAY_SECONDS: float = 1.0
DEFAULT_INITIAL_BACKOFF_SECONDS: float = 1.0
DEFAULT_BACKOFF_MULTIPLIER: float = 2.0
# None leaves the timeout to the network stack
DEFAULT_TIMEOUT: float | None = None

# =============================================================================
# Eligibility
# =============================================================================

STATE_IN_PROGRESS: int = 2
STATE_COMPLETED: int = 3
ACTIVE_STATES: frozenset[int] = frozenset({STATE_IN_PROGRESS, STATE_COMPLETED})

UNSET_SCORE: int = -1

MIN_CHARACTER_ID: int = 1
MAX_CHARACTER_ID: int = 26
MIN_STAGE_ID: int = 1
MAX_STAGE_ID: int = 29

# Stock counts at or above this value carry a color variant offset
COLOR_STOCK_THRESHOLD: int = 100

# Sanity thresholds; anything larger is usually a league or series page
SUSPICIOUS_EVENT_COUNT: int = 10
SUSPICIOUS_GROUP_COUNT: int = 200

DEFAULT_EXCLUDED_SLUGS: frozenset[str] = frozenset()
DEFAULT_EXCLUDED_OWNER_IDS: frozenset[int] = frozenset({906371, 1031337})

# =============================================================================
# Checkpointing and output
# =============================================================================

# Modern Melee history on start.gg begins February 2019
EPOCH_YEAR: int = 2019
EPOCH_MONTH: int = 2

DEFAULT_RESULTS_PATH = "results.csv"
DEFAULT_OUTPUT_DIR = "tournaments"

SUMMARY_COLUMNS: tuple[str, ...] = (
    "year",
    "month",
    "tournaments",
    "entrants",
    "players",
    "sets",
    "withCharactersAndStages",
    "withStockCounts",
    "withColors",
)
