from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base, utcnow


class Notification(Base):
    """
    A notification addressed to one user.

    Each type uses its own typed reference columns:
      property_match -> property_request_id + property_id
      message        -> message_id
      like / comment -> property_id + actor_id
    """
    __tablename__ = "notifications"

    id                  = Column(Integer, primary_key=True, index=True)
    user_id             = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type                = Column(String(50), nullable=False)
    title               = Column(String(255), nullable=False)
    content             = Column(Text, nullable=True)
    is_read             = Column(Boolean, default=False, nullable=False)
    created_at          = Column(DateTime, default=utcnow, nullable=False)

    property_request_id = Column(
        Integer, ForeignKey("property_requests.id", ondelete="CASCADE"), nullable=True, index=True
    )
    property_id         = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=True)
    message_id          = Column(Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True)
    actor_id            = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_unread", "user_id", "is_read"),
        Index("idx_notifications_type_request", "type", "property_request_id"),
    )

    user             = relationship("User", foreign_keys=[user_id], back_populates="notifications")
    property_request = relationship("PropertyRequest")
    property         = relationship("Property")
    message          = relationship("Message")
    actor            = relationship("User", foreign_keys=[actor_id])
