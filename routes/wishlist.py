from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.Trip import Trip
from models.User import User
from models.Wishlist import Wishlist
from schemas import TripRead, WishlistCheck, WishlistResponse
from services.trips import trip_to_read
from utils.auth import get_current_user

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def _find_entry(db: Session, user_id: int, trip_id: int):
    return db.query(Wishlist).filter(
        Wishlist.user_id == user_id,
        Wishlist.trip_id == trip_id
    ).first()


@router.get("", response_model=List[TripRead], response_model_exclude_unset=True)
def get_wishlist(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Saved trips, most recently saved first.
    """
    entries = (
        db.query(Wishlist)
        .filter(Wishlist.user_id == current_user.id)
        .order_by(Wishlist.created_at.desc(), Wishlist.id.desc())
        .all()
    )
    # skip entries whose trip has gone away
    return [trip_to_read(entry.trip) for entry in entries if entry.trip is not None]


@router.post("/{trip_id}", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not db.query(Trip.id).filter(Trip.id == trip_id).first():
        raise HTTPException(status_code=404, detail="Trip not found")

    if _find_entry(db, current_user.id, trip_id):
        raise HTTPException(status_code=400, detail="Trip already in wishlist")

    db.add(Wishlist(user_id=current_user.id, trip_id=trip_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Trip already in wishlist")

    return WishlistResponse(message="Trip added to wishlist", trip_id=trip_id)


@router.delete("/{trip_id}", response_model=WishlistResponse)
def remove_from_wishlist(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entry = _find_entry(db, current_user.id, trip_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Trip not found in wishlist")

    db.delete(entry)
    db.commit()
    return WishlistResponse(message="Trip removed from wishlist", trip_id=trip_id)


@router.get("/check/{trip_id}", response_model=WishlistCheck)
def check_wishlist(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return WishlistCheck(is_in_wishlist=_find_entry(db, current_user.id, trip_id) is not None)
