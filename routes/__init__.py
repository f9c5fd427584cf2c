from . import auth
from . import trips
from . import comments
from . import wishlist

__all__ = [
    "auth",
    "trips",
    "comments",
    "wishlist",
]
