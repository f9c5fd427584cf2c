# Import every model module so relationships resolve and create_all sees all tables
from . import User, Trip, TripImage, TripLike, Comment, CommentLike, Wishlist

__all__ = [
    "User",
    "Trip",
    "TripImage",
    "TripLike",
    "Comment",
    "CommentLike",
    "Wishlist",
]
