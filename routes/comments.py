from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.CommentLike import CommentLike
from models.User import User
from schemas import CommentCreate, CommentRead, CommentResponse, CommentUpdate, LikeResponse, MessageResponse
from services.comments import (
    assemble_comments,
    comment_to_read,
    create_comment,
    delete_comment,
    edit_comment,
    get_comment_or_404,
)
from services.likes import toggle_like
from utils.auth import get_current_user, get_optional_user

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/trip/{trip_id}", response_model=List[CommentRead], response_model_exclude_unset=True)
def list_trip_comments(
    trip_id: int,
    viewer: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Comment threads of a trip. isLikedByUser / isOwner are only included
    when the request carries a valid session.
    """
    return assemble_comments(db, trip_id, viewer.id if viewer else None)


@router.post("", response_model=CommentResponse, response_model_exclude_unset=True, status_code=status.HTTP_201_CREATED)
def post_comment(
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = create_comment(db, payload, current_user)
    return CommentResponse(message="Comment created successfully", comment=comment_to_read(comment))


@router.put("/{comment_id}", response_model=CommentResponse, response_model_exclude_unset=True)
def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    comment = edit_comment(db, comment_id, payload.content, current_user)
    return CommentResponse(message="Comment updated successfully", comment=comment_to_read(comment))


@router.delete("/{comment_id}", response_model=MessageResponse)
def remove_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Delete a comment and its replies (owner only).
    """
    delete_comment(db, comment_id, current_user)
    return MessageResponse(message="Comment deleted successfully")


@router.post("/{comment_id}/like", response_model=LikeResponse)
def like_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_comment_or_404(db, comment_id)
    is_liked, like_count = toggle_like(db, CommentLike, CommentLike.comment_id, comment_id, current_user.id)
    return LikeResponse(
        message="Comment liked" if is_liked else "Comment unliked",
        like_count=like_count,
        is_liked=is_liked,
    )
