"""
Admin dashboard queries
"""
import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.cache import cached, clear_cache
from app.models.message_model import Message
from app.models.property_model import Property
from app.models.property_request_model import PropertyRequest
from app.models.user_model import User
from app.schemas.admin_schema import DashboardStats
from app.schemas.pagination_schema import PaginationParams
from app.services import property_service, user_service

logger = logging.getLogger(__name__)

STATS_CACHE_PREFIX = "admin_stats"


@cached(key_prefix=STATS_CACHE_PREFIX)
def get_dashboard_stats(db: Session) -> DashboardStats:
    return DashboardStats(
        users=db.query(func.count(User.id)).scalar() or 0,
        properties=db.query(func.count(Property.id)).scalar() or 0,
        messages=db.query(func.count(Message.id)).scalar() or 0,
        requests=db.query(func.count(PropertyRequest.id)).scalar() or 0,
    )


def list_users(db: Session, pager: PaginationParams) -> Tuple[List[User], int]:
    total = db.query(func.count(User.id)).scalar() or 0
    users = (
        db.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    return users, total


def delete_user(db: Session, user_id: int) -> Tuple[bool, List[str]]:
    """
    Removes a user with everything they own. Returns whether the user existed
    and the media paths of their properties and profile picture.
    """
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        return False, []
    media: List[str] = []
    for prop in user.properties:
        media.extend(prop.image_urls or [])
        if prop.video_url:
            media.append(prop.video_url)
    if user.profile_picture:
        media.append(user.profile_picture)
    user_service.delete_user(db, user_id)
    clear_cache(STATS_CACHE_PREFIX)
    return True, media


def delete_property(db: Session, property_id: int):
    media = property_service.delete_property(db, property_id)
    if media is not None:
        clear_cache(STATS_CACHE_PREFIX)
    return media
