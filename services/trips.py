"""
Read-side projection of trips.

totalCost and likeCount are derived here from stored columns on every
read; neither is persisted.
"""
from typing import Optional

from sqlalchemy import func, select

from models.Trip import Trip
from models.TripImage import TripImage
from models.TripLike import TripLike
from schemas import (
    AuthorRead,
    Coordinates,
    Costs,
    Duration,
    ImageRef,
    LikeEntry,
    Location,
    Rating,
    TripCreate,
    TripRead,
    TripUpdate,
)


def trip_to_read(trip: Trip, viewer_id: Optional[int] = None, with_owner: bool = False) -> TripRead:
    coordinates = None
    if trip.latitude is not None or trip.longitude is not None:
        coordinates = Coordinates(latitude=trip.latitude, longitude=trip.longitude)

    data = {
        "id": trip.id,
        "title": trip.title,
        "description": trip.description,
        "location": Location(country=trip.country, city=trip.city, coordinates=coordinates),
        "duration": Duration(days=trip.duration_days),
        "costs": Costs(
            transport=trip.cost_transport,
            accommodation=trip.cost_accommodation,
            food=trip.cost_food,
            activities=trip.cost_activities,
            other=trip.cost_other,
            currency=trip.currency,
        ),
        "images": [ImageRef(url=img.url, caption=img.caption) for img in trip.images],
        "tips": list(trip.tips or []),
        "mistakes": list(trip.mistakes or []),
        "author": AuthorRead.model_validate(trip.author),
        "likes": [LikeEntry(user=like.user_id, created_at=like.created_at) for like in trip.likes],
        "like_count": trip.like_count,
        "total_cost": trip.total_cost,
        "rating": Rating(average=trip.rating_average, count=trip.rating_count),
        "is_published": trip.is_published,
        "created_at": trip.created_at,
        "updated_at": trip.updated_at,
    }
    if viewer_id is not None:
        data["is_liked_by_user"] = any(like.user_id == viewer_id for like in trip.likes)
        if with_owner:
            data["is_owner"] = trip.author_id == viewer_id
    return TripRead(**data)


def like_count_expression():
    """Correlated like count, for ordering trips by popularity."""
    return (
        select(func.count(TripLike.id))
        .where(TripLike.trip_id == Trip.id)
        .correlate(Trip)
        .scalar_subquery()
    )


def _apply_location(trip: Trip, location) -> None:
    trip.country = location.country
    trip.city = location.city
    coords = location.coordinates
    trip.latitude = coords.latitude if coords else None
    trip.longitude = coords.longitude if coords else None


def _apply_costs(trip: Trip, costs) -> None:
    trip.cost_transport = costs.transport
    trip.cost_accommodation = costs.accommodation
    trip.cost_food = costs.food
    trip.cost_activities = costs.activities
    trip.cost_other = costs.other
    trip.currency = costs.currency.value


def _image_rows(images) -> list:
    return [TripImage(url=img.url, caption=img.caption, position=i) for i, img in enumerate(images)]


def build_trip(payload: TripCreate, author_id: int) -> Trip:
    trip = Trip(
        author_id=author_id,
        title=payload.title,
        description=payload.description,
        duration_days=payload.duration.days,
        tips=list(payload.tips),
        mistakes=list(payload.mistakes),
        is_published=payload.is_published,
    )
    _apply_location(trip, payload.location)
    _apply_costs(trip, payload.costs)
    trip.images = _image_rows(payload.images)
    return trip


def apply_trip_update(trip: Trip, payload: TripUpdate) -> None:
    update_data = payload.model_dump(exclude_unset=True)

    for field in ("title", "description", "is_published"):
        if update_data.get(field) is not None:
            setattr(trip, field, update_data[field])
    if payload.location is not None:
        _apply_location(trip, payload.location)
    if payload.duration is not None:
        trip.duration_days = payload.duration.days
    if payload.costs is not None:
        _apply_costs(trip, payload.costs)
    if payload.images is not None:
        trip.images = _image_rows(payload.images)
    if payload.tips is not None:
        trip.tips = list(payload.tips)
    if payload.mistakes is not None:
        trip.mistakes = list(payload.mistakes)
