import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import authenticate_user, get_current_user, get_db
from app.core.rate_limit import limiter
from app.core.security import create_access_token
from app.models import user_model
from app.schemas import user_schema
from app.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
)


@router.post(
    "/register",
    response_model=user_schema.AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(
    request: Request,
    user_in: user_schema.UserCreate,
    db: Session = Depends(get_db),
):
    # Admin accounts are only bootstrapped from configuration
    user_in.is_admin = False
    try:
        user = user_service.create_user(db, user_in)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"User {user.id} registered")
    return {
        "message": "User created successfully",
        "token": create_access_token(user.id),
        "user": user,
    }


@router.post("/login", response_model=user_schema.AuthResponse)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(
    request: Request,
    credentials: user_schema.LoginRequest,
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {
        "message": "Login successful",
        "token": create_access_token(user.id),
        "user": user,
    }


@router.post("/token", response_model=user_schema.Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": create_access_token(user.id), "token_type": "bearer"}


@router.get("/me", response_model=user_schema.UserEnvelope)
def read_users_me(
    current_user: user_model.User = Depends(get_current_user),
):
    return {"user": current_user}
