from bookbridge.cart.repository import BookSetRepository
from bookbridge.storage.constants import WISHLIST_KEY


class WishlistRepository(BookSetRepository):
    collection_name = WISHLIST_KEY
    event_prefix = "wishlist"
