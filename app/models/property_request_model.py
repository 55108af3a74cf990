from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.config import settings
from app.core.database import Base, utcnow
from app.models.enums import RequestStatus


class PropertyRequest(Base):
    __tablename__ = "property_requests"

    id                  = Column(Integer, primary_key=True, index=True)
    user_id             = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title               = Column(String(255), nullable=False)
    property_type       = Column(String(50), nullable=False)
    category            = Column(String(50), nullable=False)
    min_price           = Column(Float, nullable=True)
    max_price           = Column(Float, nullable=True)
    currency            = Column(String(10), default=settings.DEFAULT_CURRENCY, nullable=False)
    min_bedrooms        = Column(Integer, nullable=True)
    max_bedrooms        = Column(Integer, nullable=True)
    min_bathrooms       = Column(Integer, nullable=True)
    min_area            = Column(Float, nullable=True)
    max_area            = Column(Float, nullable=True)
    preferred_cities    = Column(JSON, default=list, nullable=False)
    preferred_districts = Column(JSON, default=list, nullable=False)
    features            = Column(JSON, default=list, nullable=False)
    description         = Column(Text, nullable=True)
    contact_phone       = Column(String(20), nullable=True)
    contact_whatsapp    = Column(String(20), nullable=True)
    status              = Column(String(20), default=RequestStatus.ACTIVE.value, nullable=False, index=True)
    created_at          = Column(DateTime, default=utcnow, nullable=False)
    updated_at          = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="property_requests")
