from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship, Mapped, mapped_column

from app.database import Base, utcnow


class Friend(Base):
    """Ребро дружбы. Одна строка на пару (user_id < friend_id), читается в обе стороны."""
    __tablename__ = "friends"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    friend_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "friend_id", name="uq_user_friend"),
        CheckConstraint("user_id < friend_id", name="ck_friend_ordered"),
    )

    @classmethod
    def between(cls, user_id: int, other_id: int) -> "Friend":
        """Ребро в каноническом порядке: меньший id всегда в user_id."""
        low, high = sorted((user_id, other_id))
        return cls(user_id=low, friend_id=high)


class FriendRequest(Base):
    """
    Ожидающая заявка в друзья from_user -> to_user.
    Входящие заявки получателя и исходящие отправителя - это одна и та же строка.
    """
    __tablename__ = "friend_requests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    from_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    to_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    from_user = relationship("User", foreign_keys="FriendRequest.from_user_id", lazy="raise")
    to_user = relationship("User", foreign_keys="FriendRequest.to_user_id", lazy="raise")

    __table_args__ = (UniqueConstraint("from_user_id", "to_user_id", name="uq_friend_request"),)
