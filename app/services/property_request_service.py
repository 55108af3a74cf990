"""
Property requests and the match pass run when one is filed.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models.enums import NotificationType, PropertyStatus, RequestStatus
from app.models.notification_model import Notification
from app.models.property_model import Property
from app.models.property_request_model import PropertyRequest
from app.models.user_model import User
from app.schemas import property_request_schema
from app.schemas.pagination_schema import PaginationParams
from app.services import notification_service

logger = logging.getLogger(__name__)


def matching_properties_query(db: Session, request: PropertyRequest):
    """
    Active properties satisfying every criterion present on the request.

    Type and category match exactly, price/bedroom/area bounds are inclusive
    and preferred cities match as an OR of substrings.
    """
    query = db.query(Property).filter(Property.status == PropertyStatus.ACTIVE.value)

    if request.property_type:
        query = query.filter(Property.property_type == request.property_type)
    if request.category:
        query = query.filter(Property.category == request.category)

    if request.min_price is not None:
        query = query.filter(Property.price >= request.min_price)
    if request.max_price is not None:
        query = query.filter(Property.price <= request.max_price)

    if request.min_bedrooms is not None:
        query = query.filter(Property.bedrooms >= request.min_bedrooms)
    if request.max_bedrooms is not None:
        query = query.filter(Property.bedrooms <= request.max_bedrooms)

    if request.min_area is not None:
        query = query.filter(Property.area >= request.min_area)
    if request.max_area is not None:
        query = query.filter(Property.area <= request.max_area)

    cities = [city for city in (request.preferred_cities or []) if city]
    if cities:
        query = query.filter(or_(*[Property.city.contains(city, autoescape=True) for city in cities]))

    return query.order_by(Property.id)


def find_matching_properties(db: Session, request: PropertyRequest) -> List[Notification]:
    """
    Runs one match pass for request: one property_match notification per
    matching listing, addressed to its owner.

    Each insert happens inside its own savepoint so a failing one is logged
    and skipped without losing the others. The caller owns the commit.
    """
    created: List[Notification] = []
    for prop in matching_properties_query(db, request).all():
        notification = notification_service.build_property_match(request, prop)
        try:
            with db.begin_nested():
                db.add(notification)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to create match notification for property {prop.id} "
                f"(request {request.id}): {e}"
            )
            continue
        created.append(notification)
    logger.info(f"Request {request.id} matched {len(created)} properties")
    return created


def create_request(
    db: Session,
    owner: User,
    request_in: property_request_schema.PropertyRequestCreate,
) -> Tuple[PropertyRequest, int]:
    """Persists the request and its match notifications in one transaction"""
    data = request_in.model_dump()
    data["property_type"] = request_in.property_type.value
    data["category"] = request_in.category.value
    request = PropertyRequest(**data, user_id=owner.id)
    try:
        db.add(request)
        db.flush()
        matches = find_matching_properties(db, request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(request)
    return request, len(matches)


def _match_count_subquery(db: Session):
    return (
        db.query(
            Notification.property_request_id.label("request_id"),
            func.count(Notification.id).label("match_count"),
        )
        .filter(Notification.type == NotificationType.PROPERTY_MATCH.value)
        .group_by(Notification.property_request_id)
        .subquery()
    )


def list_user_requests(db: Session, user_id: int) -> List[property_request_schema.PropertyRequestOut]:
    counts = _match_count_subquery(db)
    rows = (
        db.query(PropertyRequest, func.coalesce(counts.c.match_count, 0))
        .outerjoin(counts, counts.c.request_id == PropertyRequest.id)
        .filter(PropertyRequest.user_id == user_id)
        .order_by(PropertyRequest.created_at.desc(), PropertyRequest.id.desc())
        .all()
    )
    result = []
    for request, match_count in rows:
        out = property_request_schema.PropertyRequestOut.model_validate(request)
        out.match_count = match_count
        result.append(out)
    return result


def list_active_requests(
    db: Session, pager: PaginationParams
) -> List[property_request_schema.PropertyRequestOut]:
    rows = (
        db.query(PropertyRequest)
        .options(joinedload(PropertyRequest.owner))
        .filter(PropertyRequest.status == RequestStatus.ACTIVE.value)
        .order_by(PropertyRequest.created_at.desc(), PropertyRequest.id.desc())
        .offset(pager.offset)
        .limit(pager.limit)
        .all()
    )
    result = []
    for request in rows:
        out = property_request_schema.PropertyRequestOut.model_validate(request)
        out.username = request.owner.username
        out.full_name = request.owner.full_name
        out.profile_picture = request.owner.profile_picture
        result.append(out)
    return result


def update_status(
    db: Session, request_id: int, user_id: int, status: RequestStatus
) -> Optional[PropertyRequest]:
    """
    Returns None both when the request does not exist and when it belongs to
    someone else.
    """
    request = (
        db.query(PropertyRequest)
        .filter(PropertyRequest.id == request_id, PropertyRequest.user_id == user_id)
        .first()
    )
    if request is None:
        return None
    request.status = status.value
    db.commit()
    db.refresh(request)
    return request
