"""Named constants for Track Match. No magic numbers."""

# --- Application ---
APP_NAME = "trackmatch"
APP_VERSION = "0.1.0"

# --- Supported Audio Extensions (local scanner) ---
SUPPORTED_EXTENSIONS = frozenset({
    ".mp3",
    ".flac",
    ".m4a",
})

# --- Fuzzy Matching ---
FUZZY_MATCH_THRESHOLD = 85  # Minimum similarity (0-100) for a tier-3 match

# --- Matching Keys ---
KEY_SEPARATOR = "_"
ARTIST_TITLE_SEPARATOR = " - "  # "Artist - Title" embedded in a title field
DEFINITE_ARTICLE_PREFIX = "the "

# Version/mix vocabulary used to split a title into core and descriptor
VERSION_KEYWORDS = (
    "remix",
    "mix",
    "edit",
    "rework",
    "bootleg",
    "mashup",
    "version",
    "radio",
    "club",
    "extended",
    "vocal",
    "instrumental",
    "dub",
    "original",
    "live",
    "acoustic",
    "unplugged",
    "remaster",
    "demo",
    "vip",
)

# --- Evaluation ---
# Ratchet: tighten this as matching improves. Never loosen it.
MAX_FALSE_NEGATIVE_RATE = 0.24  # bundled corpus: 3 of 13 false negatives still fail
EVAL_ID_FORMAT = "eval-{index:03d}"

# --- Missing Tracks ---
MISSING_REASON_NO_MATCH = "No matching local track found"
FILTER_ALL = "all"

# --- Paths ---
DEFAULT_CONFIG_FILENAME = "config.yaml"
MISSING_REPORT_BASENAME = "_missing_report"
EVAL_REPORT_BASENAME = "_eval_report"

# --- Report Strings ---
MISSING_REPORT_TITLE = "Track Match -- Missing Tracks Report"
EVAL_REPORT_TITLE = "=== TRACK MATCHING EVAL REPORT ==="
REPORT_SAMPLE_LIMIT = 10  # Failing cases shown before "... and N more"

# --- Review CSV ---
REVIEW_CSV_COLUMNS = (
    "id",
    "verdict",
    "failureCategory",
    "spotify_title",
    "spotify_artist",
    "local_title",
    "local_artist",
    "local_file_path",
    "notes",
)

# --- CLI Exit Codes ---
EXIT_OK = 0
EXIT_REGRESSION = 1
EXIT_INPUT_ERROR = 2
