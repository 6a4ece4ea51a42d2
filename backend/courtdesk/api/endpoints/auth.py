from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from courtdesk.api.deps import get_current_user, get_settings_dep
from courtdesk.core.config import Settings
from courtdesk.core.logger import logger
from courtdesk.core.security import create_access_token, get_password_hash, verify_password
from courtdesk.db import models, schemas
from courtdesk.db.database import get_db
from courtdesk.utils.exceptions import AuthenticationFailed, ValidationFailed
from courtdesk.utils.helpers import store_errors
from courtdesk.utils.validators import normalize_email

router = APIRouter()


def _auth_payload(user: models.User, settings: Settings) -> schemas.AuthPayload:
    token = create_access_token(
        data={"sub": str(user.id), "role": user.role.value},
        settings=settings,
    )
    return schemas.AuthPayload(token=token, user=schemas.UserOut.model_validate(user))


@router.post(
    "/register",
    response_model=schemas.Envelope[schemas.AuthPayload],
    status_code=status.HTTP_201_CREATED,
)
def register(
    user_in: schemas.UserRegister,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    """Register a new staff member, judge or lawyer"""
    email = normalize_email(user_in.email)

    with store_errors(db, "Failed to register user"):
        existing_user = db.query(models.User).filter(
            or_(models.User.username == user_in.username, models.User.email == email)
        ).first()
        if existing_user:
            raise ValidationFailed("User already exists")

        user = models.User(
            username=user_in.username,
            password_hash=get_password_hash(user_in.password, rounds=settings.BCRYPT_ROUNDS),
            role=user_in.role,
            name=user_in.name,
            email=email,
            phone=user_in.phone,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration
            db.rollback()
            raise ValidationFailed("User already exists")
        db.refresh(user)

    logger.info(f"User registered: {user.username} ({user.role.value})")
    return {"success": True, "data": _auth_payload(user, settings)}


@router.post("/login", response_model=schemas.Envelope[schemas.AuthPayload])
def login(
    form_data: schemas.UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    """Login with username and password"""
    with store_errors(db, "Failed to log in"):
        user = db.query(models.User).filter(models.User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise AuthenticationFailed("Invalid credentials")

    return {"success": True, "data": _auth_payload(user, settings)}


@router.get("/me", response_model=schemas.Envelope[schemas.UserOut])
def get_current_user_info(current_user: models.User = Depends(get_current_user)):
    """Get current user profile"""
    return {"success": True, "data": schemas.UserOut.model_validate(current_user)}
