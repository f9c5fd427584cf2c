# schemas.py (Pydantic v2)
# Field names are snake_case in Python and camelCase on the wire.
import re
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")


class Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(Schema):
    message: str


# ---------- Users ----------
class RegisterRequest(Schema):
    username: str
    email: EmailStr
    password: str
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        v = v.strip()
        if not 3 <= len(v) <= 20:
            raise ValueError("Username must be between 3 and 20 characters")
        if not USERNAME_RE.match(v):
            raise ValueError("Username can only contain letters, numbers, and underscores")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class LoginRequest(Schema):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class ProfileUpdate(Schema):
    """Partial update: only fields present in the body are changed"""
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)


class UserRead(Schema):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: str = ""
    created_at: datetime
    last_login: datetime


class AuthorRead(Schema):
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: str = ""
    bio: Optional[str] = None


class AuthResponse(Schema):
    message: str
    token: str
    user: UserRead


class ProfileResponse(Schema):
    user: UserRead


class ProfileUpdateResponse(Schema):
    message: str
    user: UserRead


# ---------- Likes ----------
class LikeEntry(Schema):
    user: int
    created_at: datetime


class LikeResponse(Schema):
    message: str
    like_count: int
    is_liked: bool


# ---------- Trips ----------
class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    INR = "INR"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"


class TripSort(str, Enum):
    created_at = "createdAt"
    total_cost = "totalCost"
    likes = "likes"


class Coordinates(Schema):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class Location(Schema):
    country: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    coordinates: Optional[Coordinates] = None

    @field_validator("country", "city", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class Duration(Schema):
    days: int = Field(..., ge=1)


class Costs(Schema):
    transport: float = Field(0, ge=0)
    accommodation: float = Field(0, ge=0)
    food: float = Field(0, ge=0)
    activities: float = Field(0, ge=0)
    other: float = Field(0, ge=0)
    currency: Currency = Currency.USD


class ImageRef(Schema):
    url: str = Field(..., min_length=1, max_length=500)
    caption: Optional[str] = Field(None, max_length=200)


class Rating(Schema):
    average: float = 0
    count: int = 0


TipText = Annotated[str, Field(max_length=500)]


class TripCreate(Schema):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    location: Location
    duration: Duration
    costs: Costs = Field(default_factory=Costs)
    images: List[ImageRef] = []
    tips: List[TipText] = []
    mistakes: List[TipText] = []
    is_published: bool = True

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class TripUpdate(Schema):
    """Partial update; nested groups are replaced as a whole"""
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    location: Optional[Location] = None
    duration: Optional[Duration] = None
    costs: Optional[Costs] = None
    images: Optional[List[ImageRef]] = None
    tips: Optional[List[TipText]] = None
    mistakes: Optional[List[TipText]] = None
    is_published: Optional[bool] = None


class TripRead(Schema):
    id: int
    title: str
    description: str
    location: Location
    duration: Duration
    costs: Costs
    images: List[ImageRef]
    tips: List[str]
    mistakes: List[str]
    author: AuthorRead
    likes: List[LikeEntry]
    like_count: int
    total_cost: float
    rating: Rating
    is_published: bool
    created_at: datetime
    updated_at: datetime
    # Only present when the viewer is known
    is_liked_by_user: Optional[bool] = None
    is_owner: Optional[bool] = None


class Pagination(Schema):
    current_page: int
    total_pages: int
    total_trips: int
    has_next: bool
    has_prev: bool


class TripListResponse(Schema):
    trips: List[TripRead]
    pagination: Pagination


class TripResponse(Schema):
    message: str
    trip: TripRead


# ---------- Comments ----------
class CommentType(str, Enum):
    general = "general"
    question = "question"
    answer = "answer"


def _check_content(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Comment content is required")
    if len(v) > 1000:
        raise ValueError("Comment cannot exceed 1000 characters")
    return v


class CommentCreate(Schema):
    content: str
    trip: int
    parent_comment: Optional[int] = None
    type: CommentType = CommentType.general

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        return _check_content(v)


class CommentUpdate(Schema):
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        return _check_content(v)


class CommentRead(Schema):
    id: int
    content: str
    trip: int
    author: AuthorRead
    parent_comment: Optional[int] = None
    type: CommentType
    likes: List[LikeEntry]
    like_count: int
    is_edited: bool
    created_at: datetime
    updated_at: datetime
    # Only present when the viewer is known
    is_liked_by_user: Optional[bool] = None
    is_owner: Optional[bool] = None
    # Only present on top-level comments
    replies: Optional[List["CommentRead"]] = None


class CommentResponse(Schema):
    message: str
    comment: CommentRead


# ---------- Wishlist ----------
class WishlistResponse(Schema):
    message: str
    trip_id: int


class WishlistCheck(Schema):
    is_in_wishlist: bool
