from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.config import settings
from app.core.database import Base, utcnow
from app.models.enums import PropertyStatus


class Property(Base):
    __tablename__ = "properties"

    id            = Column(Integer, primary_key=True, index=True)
    user_id       = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title         = Column(String(255), nullable=False)
    description   = Column(Text, nullable=True)
    price         = Column(Float, nullable=False)
    currency      = Column(String(10), default=settings.DEFAULT_CURRENCY, nullable=False)
    property_type = Column(String(50), nullable=False, index=True)
    category      = Column(String(50), nullable=False, index=True)
    bedrooms      = Column(Integer, nullable=True)
    bathrooms     = Column(Integer, nullable=True)
    area          = Column(Float, nullable=True)
    area_unit     = Column(String(10), default="sqm", nullable=False)
    location      = Column(String(255), nullable=False)
    city          = Column(String(100), nullable=False, index=True)
    district      = Column(String(100), nullable=True)
    latitude      = Column(Float, nullable=True)
    longitude     = Column(Float, nullable=True)
    features      = Column(JSON, default=list, nullable=False)
    image_urls    = Column(JSON, default=list, nullable=False)
    video_url     = Column(String(255), nullable=True)
    is_featured   = Column(Boolean, default=False, nullable=False)
    status        = Column(String(20), default=PropertyStatus.ACTIVE.value, nullable=False, index=True)
    views_count   = Column(Integer, default=0, nullable=False)
    created_at    = Column(DateTime, default=utcnow, nullable=False)
    updated_at    = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Composite indexes for the feed filters (status + filter)
    __table_args__ = (
        Index("idx_properties_status_type", "status", "property_type"),
        Index("idx_properties_status_category", "status", "category"),
        Index("idx_properties_featured_created", "is_featured", "created_at"),
    )

    owner    = relationship("User", back_populates="properties")
    likes    = relationship("Like", back_populates="property", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="property", cascade="all, delete-orphan", passive_deletes=True)


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_like_user_property"),
    )

    id          = Column(Integer, primary_key=True, index=True)
    user_id     = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at  = Column(DateTime, default=utcnow, nullable=False)

    user     = relationship("User", back_populates="likes")
    property = relationship("Property", back_populates="likes")


class Comment(Base):
    __tablename__ = "comments"

    id          = Column(Integer, primary_key=True, index=True)
    user_id     = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    content     = Column(Text, nullable=False)
    created_at  = Column(DateTime, default=utcnow, nullable=False)
    updated_at  = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user     = relationship("User", back_populates="comments")
    property = relationship("Property", back_populates="comments")
