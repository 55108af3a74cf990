from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.models import user_model
from app.schemas import user_schema
from app.services import media_service, property_service, user_service

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
)


@router.get("/search/{query}", response_model=user_schema.UserSearchResponse)
def search_users(
    query: str,
    db: Session = Depends(get_db),
    _: user_model.User = Depends(get_current_user),
):
    return {"users": user_service.search_users(db, query)}


# Profile update (multipart/form-data)
@router.put("/profile", response_model=user_schema.UserEnvelope)
async def update_profile(
    changes: user_schema.UserUpdate = Depends(user_schema.UserUpdate.as_form),
    profile_picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    picture_url = None
    if profile_picture is not None and profile_picture.filename:
        picture_url = await media_service.save_upload(profile_picture, "image")

    previous_picture = current_user.profile_picture
    try:
        user = user_service.update_profile(db, current_user, changes, profile_picture=picture_url)
    except ValueError as e:
        if picture_url:
            media_service.remove_files([picture_url])
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        if picture_url:
            media_service.remove_files([picture_url])
        raise

    if picture_url and previous_picture:
        media_service.remove_files([previous_picture])
    return {"user": user}


@router.get("/{username}", response_model=user_schema.UserProfileResponse)
def get_profile(
    username: str,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    user = user_service.get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    profile = user_schema.UserProfileOut(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        profile_picture=user.profile_picture,
        bio=user.bio,
        created_at=user.created_at,
        is_following=user_service.is_following(db, current_user.id, user.id),
        properties=property_service.list_user_properties(db, user.id, current_user.id),
        **user_service.get_profile_counts(db, user.id),
    )
    return {"user": profile}


@router.post("/{username}/follow", response_model=user_schema.FollowResponse)
def toggle_follow(
    username: str,
    db: Session = Depends(get_db),
    current_user: user_model.User = Depends(get_current_user),
):
    target = user_service.get_user_by_username(db, username)
    if not target:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        following = user_service.toggle_follow(db, current_user, target)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "message": "User followed" if following else "User unfollowed",
        "following": following,
    }
