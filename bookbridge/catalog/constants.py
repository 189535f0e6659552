from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.catalog")

CURRENCY_MARKER = "₹"

ALL_CATEGORIES = "All"

RECENT_BOOKS_LIMIT = 10

FEATURED_BOOKS_LIMIT = 3

SUGGESTED_BOOKS_LIMIT = 5

# original price shown struck through when the seller gave none
ORIGINAL_PRICE_FACTOR = 1.5

FUZZY_MAX_DISTANCE = 2
