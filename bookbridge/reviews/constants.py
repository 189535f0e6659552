from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.reviews")

# shown when the reviewer left no name
ANONYMOUS_REVIEWER = "Anonymous"
