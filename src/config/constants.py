"""Constants shared across the feed engine."""

# Log component names
COMPONENT_CLI = "cli"
COMPONENT_CONFIG = "config"
COMPONENT_POOL = "pool"
COMPONENT_RANKER = "ranker"
COMPONENT_REMOTE = "remote"
COMPONENT_FEED = "feed"
COMPONENT_STORE = "store"

# Key-value storage keys
LIKED_ITEMS_KEY = "freeReadLikedItemIDs"
CACHED_STORIES_KEY = "freeReadCachedStories"

# Renderable card bounds (characters)
BODY_MIN_CHARS = 40
BODY_MAX_CHARS = 1600
QUOTE_MIN_CHARS = 24
QUOTE_MAX_CHARS = 220

# Segmenter call-site budgets
POOL_SEGMENT_TARGET_CHARS = 950
MIN_PARAGRAPH_CHARS = 40

# Like-count cosmetics
LIKE_SEED_BASE = 120
LIKE_SEED_SPAN = 9200

DEFAULT_APP_ATTRIBUTION = "Shared from Readtounlock"

DEFAULT_CATALOG_URL = "https://gutendex.com/books"

# Low-signal books: reference works, children's books, catalogs.
# Matched as substrings of lowercased title, subjects and bookshelves.
DEFAULT_BLOCKED_TERMS: frozenset[str] = frozenset(
    {
        "juvenile",
        "children",
        "nursery",
        "catalog",
        "catalogue",
        "dictionary",
        "dictionaries",
        "glossary",
        "encyclopedia",
        "encyclopaedia",
        "index",
        "bibliography",
        "almanac",
        "cookbook",
        "cookery",
        "directory",
        "gazetteer",
        "tables",
        "periodicals",
        "readers",
        "phrase book",
    }
)
