import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_admin, get_db
from app.models import user_model
from app.schemas import property_schema, user_schema
from app.schemas.admin_schema import DashboardStats, MessageResponse
from app.schemas.pagination_schema import PaginatedResponse, PaginationParams, pagination
from app.services import admin_service, media_service, property_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/users", response_model=PaginatedResponse[user_schema.UserOut])
def list_users(
    pager: PaginationParams = Depends(pagination(20)),
    db: Session = Depends(get_db),
):
    users, total = admin_service.list_users(db, pager)
    items = [user_schema.UserOut.model_validate(u) for u in users]
    return PaginatedResponse[user_schema.UserOut].create(items, total, pager.page, pager.limit)


@router.get("/properties", response_model=PaginatedResponse[property_schema.PropertyOut])
def list_properties(
    pager: PaginationParams = Depends(pagination(20)),
    db: Session = Depends(get_db),
):
    items, total = property_service.list_all_properties(db, pager)
    return PaginatedResponse[property_schema.PropertyOut].create(items, total, pager.page, pager.limit)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: user_model.User = Depends(get_current_admin),
):
    if user_id == current_admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    deleted, media = admin_service.delete_user(db, user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    media_service.remove_files(media)
    logger.info(f"Admin {current_admin.id} deleted user {user_id}")
    return {"message": "User deleted successfully"}


@router.delete("/properties/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: int,
    db: Session = Depends(get_db),
):
    media = admin_service.delete_property(db, property_id)
    if media is None:
        raise HTTPException(status_code=404, detail="Property not found")
    media_service.remove_files(media)
    return {"message": "Property deleted successfully"}


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return admin_service.get_dashboard_stats(db)
