from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base, utcnow
from app.models.enums import MessageType


class Message(Base):
    __tablename__ = "messages"

    id           = Column(Integer, primary_key=True, index=True)
    sender_id    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id  = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id  = Column(Integer, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True)
    content      = Column(Text, nullable=False)
    message_type = Column(String(20), default=MessageType.TEXT.value, nullable=False)
    is_read      = Column(Boolean, default=False, nullable=False)
    created_at   = Column(DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_messages_receiver_unread", "receiver_id", "is_read"),
    )

    sender   = relationship("User", foreign_keys=[sender_id], back_populates="sent_messages")
    receiver = relationship("User", foreign_keys=[receiver_id], back_populates="received_messages")
    property = relationship("Property")
