import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core import database
from app.core.config import settings
from app.core.security import decode_access_token, verify_password
from app.models import user_model
from app.schemas import user_schema
from app.services import user_service

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")


# Lifespan handler: bootstraps the admin account on startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ADMIN_PASSWORD:
        db = database.SessionLocal()
        try:
            if not user_service.get_user_by_username(db, settings.ADMIN_USERNAME):
                admin_in = user_schema.UserCreate(
                    username=settings.ADMIN_USERNAME,
                    email=settings.ADMIN_EMAIL,
                    full_name="Admin User",
                    password=settings.ADMIN_PASSWORD,
                    is_admin=True
                )
                try:
                    user_service.create_user(db, admin_in)
                    logger.info(f"Admin user '{settings.ADMIN_USERNAME}' created")
                except Exception as e:
                    logger.error(f"Failed to create admin user: {e}", exc_info=True)
                    raise
        finally:
            db.close()
    else:
        logger.info("ADMIN_PASSWORD not set, skipping admin bootstrap")
    yield


def get_db():
    db = database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def authenticate_user(db: Session, login: str, password: str) -> Optional[user_model.User]:
    user = user_service.get_user_by_login(db, login)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> user_model.User:
    # A missing header is rejected with 401 by oauth2_scheme before we get here
    user_id = decode_access_token(token)
    if user_id is None:
        raise HTTPException(status_code=403, detail="Invalid or expired token")
    user = user_service.get_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=403, detail="User not found")
    return user


def get_current_admin(
    current_user: user_model.User = Depends(get_current_user)
) -> user_model.User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
