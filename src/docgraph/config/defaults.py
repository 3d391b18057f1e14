"""Default configurations for docgraph.

Algorithm constants live here rather than in settings: they shape the
observable contract of a build (pagination, truncation) and are not tuned
per run.
"""

# Document file extension (matched case-insensitively by the scanner)
DOCUMENT_EXTENSION = ".md"

# Directory names never descended into, on top of hidden entries
IGNORED_DIRECTORIES = frozenset(
    {
        "node_modules",  # npm / yarn packages
        "dist",  # build output
        "build",  # build output
        ".git",  # version control metadata
    }
)

# Prefix marking hidden files and directories
HIDDEN_PREFIX = "."

# Wiki-link targets with these extensions are embeds, not document references
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".bmp", ".ico")

# Files whose stat size exceeds this are parsed from a truncated prefix
LARGE_FILE_THRESHOLD = 1024 * 1024  # 1 MiB

# Size of the prefix parsed for large files
LARGE_FILE_PARSE_LIMIT = 100 * 1024  # 100 KiB

# Files parsed between yields to the host event loop
BATCH_SIZE_BEFORE_YIELD = 5

# Front matter keys checked for a description, in priority order
DESCRIPTION_KEYS = (
    "description",
    "overview",
    "abstract",
    "summary",
    "synopsis",
    "intro",
    "introduction",
    "about",
    "tldr",
    "excerpt",
    "blurb",
    "brief",
    "preamble",
)

# ── Force / hierarchical layout ─────────────────────────────────────────

DEFAULT_NODE_WIDTH = 280
DEFAULT_NODE_HEIGHT = 120
EXTERNAL_NODE_LAYOUT_WIDTH = 160
EXTERNAL_NODE_LAYOUT_HEIGHT = 60
DEFAULT_NODE_SEPARATION = 50
DEFAULT_RANK_SEPARATION = 100
HIERARCHICAL_MARGIN = 50

FORCE_ITERATIONS = 300
# External nodes repel less than documents (they are expected to cluster)
FORCE_DOCUMENT_CHARGE = -400.0
FORCE_EXTERNAL_CHARGE = -150.0
FORCE_CHARGE_DISTANCE_MAX = 500.0
# External edges are longer and weaker than internal ones
FORCE_INTERNAL_LINK_STRENGTH = 0.7
FORCE_EXTERNAL_LINK_STRENGTH = 0.3
FORCE_EXTERNAL_LINK_DISTANCE_FACTOR = 1.5
FORCE_COLLIDE_BUFFER = 20.0
FORCE_COLLIDE_STRENGTH = 0.8
FORCE_CENTER_STRENGTH = 0.05
FORCE_VELOCITY_DECAY = 0.4
FORCE_RANDOM_SPREAD = 500.0

# ── Mind map layout ─────────────────────────────────────────────────────

MINDMAP_HORIZONTAL_SPACING = 300
MINDMAP_VERTICAL_SPACING = 90
MINDMAP_NODE_WIDTH = 240
MINDMAP_NODE_HEIGHT_BASE = 52
MINDMAP_NODE_HEIGHT_WITH_DESC = 88
MINDMAP_CENTER_NODE_SCALE = 1.15
MINDMAP_EXTERNAL_NODE_WIDTH = 140
MINDMAP_EXTERNAL_NODE_HEIGHT = 36
MINDMAP_EXTERNAL_NODE_GAP = 20
MINDMAP_EXTERNAL_CLUSTER_OFFSET = 100
MINDMAP_EXTERNAL_CENTER_LIFT = 50
MINDMAP_CANVAS_PADDING = 60
MINDMAP_OPEN_ICON_SIZE = 16
MINDMAP_OPEN_ICON_PADDING = 10
MINDMAP_MAX_DEPTH = 5

# Interaction
DOUBLE_CLICK_THRESHOLD_MS = 300
FOCUS_PAN_PADDING = 100
COLUMN_TOLERANCE = 50
MIN_ZOOM = 0.2
MAX_ZOOM = 3.0

# ── Watcher ─────────────────────────────────────────────────────────────

WATCH_DEBOUNCE_DELAY = 0.5  # seconds
