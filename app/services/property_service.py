import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, exists, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from app.models.enums import PropertyStatus
from app.models.property_model import Comment, Like, Property
from app.models.user_model import User
from app.schemas import property_schema
from app.schemas.pagination_schema import PaginationParams
from app.services import notification_service

logger = logging.getLogger(__name__)


def _like_count():
    return (
        select(func.count(Like.id))
        .where(Like.property_id == Property.id)
        .correlate(Property)
        .scalar_subquery()
    )


def _comment_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.property_id == Property.id)
        .correlate(Property)
        .scalar_subquery()
    )


def _is_liked(viewer_id: Optional[int]):
    return (
        exists()
        .where(and_(Like.property_id == Property.id, Like.user_id == viewer_id))
        .correlate(Property)
    )


def _with_aggregates(db: Session, viewer_id: Optional[int]) -> Query:
    """Property rows with like_count, comment_count and is_liked (for viewer_id)"""
    return (
        db.query(
            Property,
            _like_count().label("like_count"),
            _comment_count().label("comment_count"),
            _is_liked(viewer_id).label("is_liked"),
        )
        .options(joinedload(Property.owner))
    )


def _to_out(rows, include_phone: bool = False) -> List[property_schema.PropertyOut]:
    return [
        property_schema.PropertyOut.from_row(
            prop, like_count, comment_count, is_liked, include_phone=include_phone
        )
        for prop, like_count, comment_count, is_liked in rows
    ]


# --- listings ---

def list_feed(
    db: Session,
    viewer_id: int,
    filters: property_schema.PropertyFilters,
    pager: PaginationParams,
) -> List[property_schema.PropertyOut]:
    query = _with_aggregates(db, viewer_id).filter(Property.status == PropertyStatus.ACTIVE.value)
    if filters.type:
        query = query.filter(Property.property_type == filters.type.value)
    if filters.category:
        query = query.filter(Property.category == filters.category.value)
    if filters.city:
        query = query.filter(Property.city.contains(filters.city, autoescape=True))
    if filters.min_price is not None:
        query = query.filter(Property.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Property.price <= filters.max_price)

    rows = (
        query.order_by(Property.is_featured.desc(), Property.created_at.desc(), Property.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    return _to_out(rows)


def list_reels(db: Session, viewer_id: int) -> List[property_schema.PropertyOut]:
    rows = (
        _with_aggregates(db, viewer_id)
        .filter(
            Property.status == PropertyStatus.ACTIVE.value,
            Property.video_url.isnot(None),
            Property.video_url != "",
        )
        .order_by(Property.created_at.desc(), Property.id.desc())
        .all()
    )
    return _to_out(rows)


def list_user_properties(db: Session, owner_id: int, viewer_id: int) -> List[property_schema.PropertyOut]:
    rows = (
        _with_aggregates(db, viewer_id)
        .filter(Property.user_id == owner_id, Property.status == PropertyStatus.ACTIVE.value)
        .order_by(Property.created_at.desc(), Property.id.desc())
        .all()
    )
    return _to_out(rows)


def list_all_properties(db: Session, pager: PaginationParams) -> Tuple[List[property_schema.PropertyOut], int]:
    """Every property regardless of status, for the admin dashboard"""
    total = db.query(func.count(Property.id)).scalar() or 0
    rows = (
        _with_aggregates(db, None)
        .order_by(Property.created_at.desc(), Property.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    return _to_out(rows), total


# --- single property ---

def get_property(db: Session, property_id: int) -> Optional[Property]:
    return db.get(Property, property_id)


def get_active_property(db: Session, property_id: int) -> Optional[Property]:
    return (
        db.query(Property)
        .filter(Property.id == property_id, Property.status == PropertyStatus.ACTIVE.value)
        .first()
    )


def increment_views(db: Session, property_id: int) -> Optional[int]:
    """
    Atomically bumps views_count of an active property by one and returns the
    new value, or None when the property is absent or not active.
    """
    stmt = (
        update(Property)
        .where(Property.id == property_id, Property.status == PropertyStatus.ACTIVE.value)
        .values(views_count=Property.views_count + 1, updated_at=Property.updated_at)
        .returning(Property.views_count)
        .execution_options(synchronize_session=False)
    )
    views = db.execute(stmt).scalar_one_or_none()
    db.commit()
    return views


def view_property(db: Session, property_id: int, viewer_id: int) -> Optional[property_schema.PropertyOut]:
    views = increment_views(db, property_id)
    if views is None:
        return None
    row = (
        _with_aggregates(db, viewer_id)
        .filter(Property.id == property_id)
        .first()
    )
    if row is None:
        return None
    out = _to_out([row], include_phone=True)[0]
    out.views_count = views
    return out


def create_property(
    db: Session,
    owner: User,
    property_in: property_schema.PropertyCreate,
    image_urls: Optional[List[str]] = None,
    video_url: Optional[str] = None,
) -> Property:
    data = property_in.model_dump()
    data["property_type"] = property_in.property_type.value
    data["category"] = property_in.category.value
    db_property = Property(
        **data,
        user_id=owner.id,
        image_urls=list(image_urls or []),
        video_url=video_url,
    )
    db.add(db_property)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_property)
    logger.info(f"Property {db_property.id} created by user {owner.id}")
    return db_property


def delete_property(db: Session, property_id: int) -> Optional[List[str]]:
    """
    Deletes a property and returns the media paths it referenced, or None if
    it does not exist.
    """
    prop = db.get(Property, property_id)
    if not prop:
        return None
    media = list(prop.image_urls or [])
    if prop.video_url:
        media.append(prop.video_url)
    db.delete(prop)
    db.commit()
    logger.info(f"Property {property_id} deleted")
    return media


# --- likes & comments ---

def toggle_like(db: Session, prop: Property, user: User) -> bool:
    """Returns True when the property is now liked by user"""
    existing = (
        db.query(Like)
        .filter(Like.user_id == user.id, Like.property_id == prop.id)
        .first()
    )
    try:
        if existing:
            db.delete(existing)
            liked = False
        else:
            db.add(Like(user_id=user.id, property_id=prop.id))
            if prop.user_id != user.id:
                db.add(notification_service.build_like(prop, user))
            liked = True
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return liked


def list_comments(db: Session, property_id: int) -> List[Comment]:
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.property_id == property_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def add_comment(db: Session, prop: Property, user: User, content: str) -> Comment:
    comment = Comment(user_id=user.id, property_id=prop.id, content=content.strip())
    db.add(comment)
    if prop.user_id != user.id:
        db.add(notification_service.build_comment(prop, user, comment.content))
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(comment)
    return comment
