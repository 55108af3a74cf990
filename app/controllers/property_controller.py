import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db
from app.models import user_model
from app.models.enums import PropertyCategory, PropertyType
from app.schemas import property_schema
from app.schemas.pagination_schema import PaginationParams, pagination
from app.services import media_service, property_service, user_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/properties",
    tags=["Properties"],
)


def property_filters(
    type: Optional[PropertyType] = Query(None),
    category: Optional[PropertyCategory] = Query(None),
    city: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
) -> property_schema.PropertyFilters:
    return property_schema.PropertyFilters(
        type=type, category=category, city=city, min_price=min_price, max_price=max_price
    )


def _get_property_or_404(db: Session, property_id: int):
    prop = property_service.get_property(db, property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.get("/feed", response_model=property_schema.PropertyListResponse)
def get_feed(
    filters: property_schema.PropertyFilters = Depends(property_filters),
    pager: PaginationParams = Depends(pagination()),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return {"properties": property_service.list_feed(db, current_user.id, filters, pager)}


@router.get("/reels", response_model=property_schema.PropertyListResponse)
def get_reels(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return {"properties": property_service.list_reels(db, current_user.id)}


@router.get("/user/{username}", response_model=property_schema.PropertyListResponse)
def get_user_properties(
    username: str,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    owner = user_service.get_user_by_username(db, username)
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")
    return {"properties": property_service.list_user_properties(db, owner.id, current_user.id)}


# Properties - creation (multipart/form-data)
@router.post(
    "/",
    response_model=property_schema.PropertyCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_property(
    property_in: property_schema.PropertyCreate = Depends(property_schema.PropertyCreate.as_form),
    images: Optional[List[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    images = [img for img in (images or []) if img.filename]
    if len(images) > settings.MAX_IMAGES:
        raise HTTPException(
            status_code=400,
            detail=f"At most {settings.MAX_IMAGES} images are allowed"
        )

    image_urls = await media_service.save_uploads(images, "image")
    saved = list(image_urls)
    try:
        video_url = None
        if video is not None and video.filename:
            video_url = await media_service.save_upload(video, "video")
            saved.append(video_url)
        prop = property_service.create_property(
            db, current_user, property_in, image_urls=image_urls, video_url=video_url
        )
    except Exception:
        media_service.remove_files(saved)
        raise

    return {
        "message": "Property created successfully",
        "property": property_schema.PropertyOut.from_row(prop),
    }


@router.get("/{property_id}", response_model=property_schema.PropertyEnvelope)
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    prop = property_service.view_property(db, property_id, current_user.id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return {"property": prop}


@router.post("/{property_id}/like", response_model=property_schema.LikeResponse)
def toggle_like(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    prop = _get_property_or_404(db, property_id)
    liked = property_service.toggle_like(db, prop, current_user)
    return {
        "message": "Property liked" if liked else "Property unliked",
        "liked": liked,
    }


@router.get("/{property_id}/comments", response_model=property_schema.CommentListResponse)
def list_comments(
    property_id: int,
    db: Session = Depends(get_db),
    _: user_model.User = Depends(get_current_user),
):
    _get_property_or_404(db, property_id)
    comments = property_service.list_comments(db, property_id)
    return {"comments": [property_schema.CommentOut.from_comment(c) for c in comments]}


@router.post(
    "/{property_id}/comments",
    response_model=property_schema.CommentCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    property_id: int,
    comment_in: property_schema.CommentCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    prop = _get_property_or_404(db, property_id)
    comment = property_service.add_comment(db, prop, current_user, comment_in.content)
    return {
        "message": "Comment added successfully",
        "comment": property_schema.CommentOut.from_comment(comment),
    }
