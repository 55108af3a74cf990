from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.models import user_model
from app.schemas import property_request_schema
from app.schemas.admin_schema import MessageResponse
from app.schemas.pagination_schema import PaginationParams, pagination
from app.services import property_request_service

router = APIRouter(
    prefix="/api/property-requests",
    tags=["Property Requests"],
)


@router.post(
    "/",
    response_model=property_request_schema.PropertyRequestCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_property_request(
    request_in: property_request_schema.PropertyRequestCreate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    request, match_count = property_request_service.create_request(db, current_user, request_in)
    return {
        "message": "Property request created successfully",
        "request_id": request.id,
        "match_count": match_count,
    }


@router.get("/my-requests", response_model=property_request_schema.PropertyRequestListResponse)
def my_requests(
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    return {"requests": property_request_service.list_user_requests(db, current_user.id)}


@router.get("/active", response_model=property_request_schema.PropertyRequestListResponse)
def active_requests(
    pager: PaginationParams = Depends(pagination()),
    db: Session = Depends(get_db),
    _: user_model.User = Depends(get_current_user),
):
    return {"requests": property_request_service.list_active_requests(db, pager)}


@router.patch("/{request_id}/status", response_model=MessageResponse)
def update_request_status(
    request_id: int,
    status_in: property_request_schema.StatusUpdate,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    request = property_request_service.update_status(
        db, request_id, current_user.id, status_in.status
    )
    if not request:
        raise HTTPException(status_code=404, detail="Request not found")
    return {"message": "Request status updated successfully"}
