from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from database import Base, utcnow

COMMENT_TYPES = ("general", "question", "answer")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    # Plain reference: deleting a trip leaves its comments in place
    trip_id = Column(Integer, nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_comment_id = Column(Integer, ForeignKey("comments.id"), nullable=True, index=True)
    type = Column(String(20), default="general", nullable=False)
    is_edited = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    author = relationship("User", lazy="joined")
    likes = relationship(
        "CommentLike", back_populates="comment", cascade="all, delete-orphan", order_by="CommentLike.created_at"
    )

    @property
    def like_count(self) -> int:
        return len(self.likes)

    def is_reply(self) -> bool:
        return self.parent_comment_id is not None
