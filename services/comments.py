"""
Comment threads for trips.

Threads are one level deep: top-level comments hang off a trip and replies
hang off a top-level comment. Replies to replies are rejected on creation,
so reading a thread never needs more than two queries.
"""
from collections import defaultdict
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from database import utcnow
from models.Comment import Comment
from models.CommentLike import CommentLike
from models.Trip import Trip
from models.User import User
from schemas import AuthorRead, CommentCreate, CommentRead, LikeEntry
from utils.auth import require_owner
from utils.logger import setup_api_logger

logger = setup_api_logger()


def comment_to_read(comment: Comment, viewer_id: Optional[int] = None, replies=None) -> CommentRead:
    """Build the wire representation of a comment.

    Viewer flags are only set when a viewer is known and `replies` only for
    top-level comments, so unset keys can be left out of the response.
    """
    data = {
        "id": comment.id,
        "content": comment.content,
        "trip": comment.trip_id,
        "author": AuthorRead.model_validate(comment.author),
        "parent_comment": comment.parent_comment_id,
        "type": comment.type,
        "likes": [LikeEntry(user=like.user_id, created_at=like.created_at) for like in comment.likes],
        "like_count": comment.like_count,
        "is_edited": comment.is_edited,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
    }
    if viewer_id is not None:
        data["is_liked_by_user"] = any(like.user_id == viewer_id for like in comment.likes)
        data["is_owner"] = comment.author_id == viewer_id
    if replies is not None:
        data["replies"] = replies
    return CommentRead(**data)


def get_trip_or_404(db: Session, trip_id: int) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trip not found")
    return trip


def get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


def assemble_comments(db: Session, trip_id: int, viewer_id: Optional[int] = None) -> List[CommentRead]:
    """
    Return the comment threads of a trip.

    Top-level comments come newest first; the replies under each one come
    oldest first so a thread reads in the order it was written.
    """
    get_trip_or_404(db, trip_id)

    top_level = (
        db.query(Comment)
        .options(selectinload(Comment.likes))
        .filter(Comment.trip_id == trip_id, Comment.parent_comment_id.is_(None))
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )
    if not top_level:
        return []

    replies_by_parent: Dict[int, List[Comment]] = defaultdict(list)
    replies = (
        db.query(Comment)
        .options(selectinload(Comment.likes))
        .filter(Comment.parent_comment_id.in_([c.id for c in top_level]))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    for reply in replies:
        replies_by_parent[reply.parent_comment_id].append(reply)

    return [
        comment_to_read(
            comment,
            viewer_id,
            replies=[comment_to_read(r, viewer_id) for r in replies_by_parent[comment.id]],
        )
        for comment in top_level
    ]


def create_comment(db: Session, payload: CommentCreate, author: User) -> Comment:
    get_trip_or_404(db, payload.trip)

    if payload.parent_comment is not None:
        parent = db.query(Comment).filter(Comment.id == payload.parent_comment).first()
        if not parent:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent comment not found")
        if parent.is_reply():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Replies can only be added to top-level comments",
            )
        if parent.trip_id != payload.trip:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent comment belongs to a different trip",
            )

    now = utcnow()
    comment = Comment(
        content=payload.content,
        trip_id=payload.trip,
        author_id=author.id,
        parent_comment_id=payload.parent_comment,
        type=payload.type.value,
        created_at=now,
        updated_at=now,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s created on trip %s by user %s", comment.id, comment.trip_id, author.id)
    return comment


def edit_comment(db: Session, comment_id: int, content: str, user: User) -> Comment:
    comment = get_comment_or_404(db, comment_id)
    require_owner(comment.author_id, user, "Not authorized to update this comment")

    # Saving identical content is not an edit
    if content != comment.content:
        comment.content = content
        comment.is_edited = True
        comment.updated_at = utcnow()
        db.commit()
        db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int, user: User) -> None:
    """Delete a comment together with its direct replies.

    Replies go regardless of who wrote them. Everything is removed in a
    single transaction.
    """
    comment = get_comment_or_404(db, comment_id)
    require_owner(comment.author_id, user, "Not authorized to delete this comment")

    reply_ids = [
        row.id for row in db.query(Comment.id).filter(Comment.parent_comment_id == comment_id).all()
    ]
    doomed = reply_ids + [comment_id]

    db.query(CommentLike).filter(CommentLike.comment_id.in_(doomed)).delete(synchronize_session=False)
    if reply_ids:
        db.query(Comment).filter(Comment.id.in_(reply_ids)).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)
    db.commit()
    logger.info("Comment %s deleted with %d replies by user %s", comment_id, len(reply_ids), user.id)
