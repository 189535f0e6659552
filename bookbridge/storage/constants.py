from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.storage")

# Store keys, one per collection. These are the on-device schema: renaming one
# orphans the data of every existing install.
BOOKS_KEY = "@books"
RECENT_BOOKS_KEY = "@recent_books"
REVIEWS_KEY = "@reviews"
ADDRESSES_KEY = "@addresses"
ORDERS_KEY = "@orders"
CART_KEY = "@cart"
WISHLIST_KEY = "@wishlist"
PROFILES_KEY = "@user_profiles"
ACCOUNTS_KEY = "@users"
SESSIONS_KEY = "@sessions"
REFRESH_TOKENS_KEY = "@refresh_tokens"
VERIFICATION_TOKENS_KEY = "@verification_tokens"
