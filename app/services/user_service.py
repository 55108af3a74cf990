import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.security import hash_password
from app.models.enums import PropertyStatus
from app.models.property_model import Property
from app.models.user_model import Follow, User
from app.schemas import user_schema

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def get_user_by_login(db: Session, login: str) -> Optional[User]:
    return db.query(User).filter(or_(User.username == login, User.email == login)).first()


def create_user(db: Session, user_in: user_schema.UserCreate) -> User:
    if get_user_by_username(db, user_in.username):
        raise ValueError("Username already registered")
    if get_user_by_email(db, user_in.email):
        raise ValueError("Email already registered")

    db_user = User(
        username=user_in.username,
        email=user_in.email,
        full_name=user_in.full_name,
        phone=user_in.phone,
        hashed_password=hash_password(user_in.password),
        is_admin=bool(user_in.is_admin),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError("Username or email already registered")
    db.refresh(db_user)
    return db_user


def update_profile(
    db: Session,
    user: User,
    changes: user_schema.UserUpdate,
    profile_picture: Optional[str] = None,
) -> User:
    data = changes.model_dump(exclude_none=True)
    if "email" in data and data["email"] != user.email:
        if get_user_by_email(db, data["email"]):
            raise ValueError("Email already registered")
    for field, value in data.items():
        setattr(user, field, value)
    if profile_picture:
        user.profile_picture = profile_picture
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> bool:
    db_user = db.get(User, user_id)
    if not db_user:
        return False
    db.delete(db_user)
    db.commit()
    logger.info(f"User {user_id} deleted")
    return True


def search_users(db: Session, query: str, limit: int = 20) -> List[User]:
    return (
        db.query(User)
        .filter(
            or_(
                User.username.icontains(query, autoescape=True),
                User.full_name.icontains(query, autoescape=True),
            )
        )
        .order_by(User.username)
        .limit(limit)
        .all()
    )


def get_profile_counts(db: Session, user_id: int) -> Dict[str, int]:
    property_count = (
        db.query(func.count(Property.id))
        .filter(Property.user_id == user_id, Property.status == PropertyStatus.ACTIVE.value)
        .scalar()
    )
    followers_count = db.query(func.count(Follow.id)).filter(Follow.following_id == user_id).scalar()
    following_count = db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar()
    return {
        "property_count": property_count or 0,
        "followers_count": followers_count or 0,
        "following_count": following_count or 0,
    }


def is_following(db: Session, follower_id: int, following_id: int) -> bool:
    return (
        db.query(Follow.id)
        .filter(Follow.follower_id == follower_id, Follow.following_id == following_id)
        .first()
        is not None
    )


def toggle_follow(db: Session, follower: User, target: User) -> bool:
    """Returns True when the follower now follows the target"""
    if follower.id == target.id:
        raise ValueError("You cannot follow yourself")
    existing = (
        db.query(Follow)
        .filter(Follow.follower_id == follower.id, Follow.following_id == target.id)
        .first()
    )
    if existing:
        db.delete(existing)
        db.commit()
        return False
    db.add(Follow(follower_id=follower.id, following_id=target.id))
    db.commit()
    return True
