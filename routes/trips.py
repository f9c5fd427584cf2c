import math
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

import config
from database import get_db, utcnow
from models.Trip import Trip
from models.TripLike import TripLike
from models.User import User
from schemas import (
    LikeResponse,
    MessageResponse,
    Pagination,
    TripCreate,
    TripListResponse,
    TripRead,
    TripResponse,
    TripSort,
    TripUpdate,
)
from services.likes import toggle_like
from services.trips import apply_trip_update, build_trip, like_count_expression, trip_to_read
from utils.auth import get_current_user, get_optional_user, require_owner
from utils.geocoding_helpers import build_place_query, geocode_place_to_coords
from utils.logger import setup_api_logger

logger = setup_api_logger()
router = APIRouter(prefix="/trips", tags=["Trips"])


def _get_trip_or_404(db: Session, trip_id: int) -> Trip:
    trip = (
        db.query(Trip)
        .options(selectinload(Trip.likes), selectinload(Trip.images))
        .filter(Trip.id == trip_id)
        .first()
    )
    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")
    return trip


@router.get("", response_model=TripListResponse, response_model_exclude_unset=True)
def list_trips(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    country: Optional[str] = None,
    city: Optional[str] = None,
    min_cost: Optional[float] = Query(None, alias="minCost", ge=0),
    max_cost: Optional[float] = Query(None, alias="maxCost", ge=0),
    sort_by: TripSort = Query(TripSort.created_at, alias="sortBy"),
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    List published trips, newest first unless sortBy says otherwise.
    Country and city match case-insensitively on a substring.
    """
    query = db.query(Trip).filter(Trip.is_published == True)

    if country:
        query = query.filter(Trip.country.ilike(f"%{country}%"))
    if city:
        query = query.filter(Trip.city.ilike(f"%{city}%"))
    if min_cost is not None:
        query = query.filter(Trip.total_cost >= min_cost)
    if max_cost is not None:
        query = query.filter(Trip.total_cost <= max_cost)

    total = query.count()

    if sort_by == TripSort.likes:
        query = query.order_by(like_count_expression().desc(), Trip.created_at.desc())
    elif sort_by == TripSort.total_cost:
        query = query.order_by(Trip.total_cost.desc(), Trip.created_at.desc())
    else:
        query = query.order_by(Trip.created_at.desc(), Trip.id.desc())

    trips = (
        query.options(selectinload(Trip.likes), selectinload(Trip.images))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    viewer_id = viewer.id if viewer else None
    total_pages = math.ceil(total / limit)
    return TripListResponse(
        trips=[trip_to_read(t, viewer_id) for t in trips],
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            total_trips=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


@router.get("/user/{user_id}", response_model=List[TripRead], response_model_exclude_unset=True)
def list_user_trips(user_id: int, db: Session = Depends(get_db)):
    """
    Published trips of one user, newest first.
    """
    trips = (
        db.query(Trip)
        .options(selectinload(Trip.likes), selectinload(Trip.images))
        .filter(Trip.author_id == user_id, Trip.is_published == True)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )
    return [trip_to_read(t) for t in trips]


@router.get("/{trip_id}", response_model=TripRead, response_model_exclude_unset=True)
def get_trip(
    trip_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    trip = _get_trip_or_404(db, trip_id)
    return trip_to_read(trip, viewer.id if viewer else None, with_owner=True)


@router.post("", response_model=TripResponse, response_model_exclude_unset=True, status_code=status.HTTP_201_CREATED)
async def create_trip(
    payload: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    trip = build_trip(payload, current_user.id)

    if config.GEOCODING_ENABLED and (trip.latitude is None or trip.longitude is None):
        place_query = build_place_query(city=trip.city, country=trip.country)
        if place_query:
            result = await geocode_place_to_coords(place_query)
            if result:
                trip.latitude, trip.longitude = result

    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info("Trip %s created by user %s", trip.id, current_user.id)
    return TripResponse(message="Trip created successfully", trip=trip_to_read(trip))


@router.put("/{trip_id}", response_model=TripResponse, response_model_exclude_unset=True)
def update_trip(
    trip_id: int,
    payload: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    trip = _get_trip_or_404(db, trip_id)
    require_owner(trip.author_id, current_user, "Not authorized to update this trip")

    apply_trip_update(trip, payload)
    # image-only or unchanged edits never touch the trips row
    trip.updated_at = utcnow()
    db.commit()
    db.refresh(trip)
    return TripResponse(message="Trip updated successfully", trip=trip_to_read(trip))


@router.delete("/{trip_id}", response_model=MessageResponse)
def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete a trip with its images, likes and wishlist entries.
    Comments on the trip are kept.
    """
    trip = _get_trip_or_404(db, trip_id)
    require_owner(trip.author_id, current_user, "Not authorized to delete this trip")

    db.delete(trip)
    db.commit()
    logger.info("Trip %s deleted by user %s", trip_id, current_user.id)
    return MessageResponse(message="Trip deleted successfully")


@router.post("/{trip_id}/like", response_model=LikeResponse)
def like_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Like the trip, or take the like back if it is already there.
    """
    if not db.query(Trip.id).filter(Trip.id == trip_id).first():
        raise HTTPException(status_code=404, detail="Trip not found")

    is_liked, like_count = toggle_like(db, TripLike, TripLike.trip_id, trip_id, current_user.id)
    return LikeResponse(
        message="Trip liked" if is_liked else "Trip unliked",
        like_count=like_count,
        is_liked=is_liked,
    )
