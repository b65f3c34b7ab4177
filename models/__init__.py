"""Model package exports."""

from models.closet_item import ClosetItem
from models.notification import Notification
from models.ootd_post import Comment, OOTDPost
from models.product import Product, product_identity
from models.user import User
from models.wishlist_item import WishlistItem

__all__ = [
    "ClosetItem",
    "Comment",
    "Notification",
    "OOTDPost",
    "Product",
    "User",
    "WishlistItem",
    "product_identity",
]
