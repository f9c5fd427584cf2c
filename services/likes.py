"""
Like toggling shared by trips and comments.

A like is a (entity, user) row guarded by a unique constraint, so the
toggle is a set-membership flip: delete the row if it exists, otherwise
insert it. No read-modify-write on a shared list is involved.
"""
from typing import Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session


def toggle_like(db: Session, like_model, entity_column, entity_id: int, user_id: int) -> Tuple[bool, int]:
    """Flip `user_id`'s like on an entity.

    Returns (is_liked, like_count) after the flip. `entity_column` is the
    like model's foreign key column, e.g. TripLike.trip_id.
    """
    deleted = (
        db.query(like_model)
        .filter(entity_column == entity_id, like_model.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if deleted:
        db.commit()
        is_liked = False
    else:
        db.add(like_model(**{entity_column.key: entity_id, "user_id": user_id}))
        try:
            db.commit()
        except IntegrityError:
            # a concurrent request by the same user inserted it first
            db.rollback()
        is_liked = True

    like_count = (
        db.query(func.count(like_model.id))
        .filter(entity_column == entity_id)
        .scalar()
    )
    return is_liked, like_count
