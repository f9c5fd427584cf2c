from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from database import get_db, utcnow
from models.User import User
from schemas import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    RegisterRequest,
    UserRead,
)
from utils.auth import get_current_user
from utils.logger import setup_api_logger
from utils.security import create_access_token

logger = setup_api_logger()
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    existing = db.query(User).filter(
        or_(User.email == payload.email, User.username == payload.username)
    ).first()
    if existing:
        detail = "Email already registered" if existing.email == payload.email else "Username already taken"
        raise HTTPException(status_code=400, detail=detail)

    user = User(
        username=payload.username,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    user.set_password(payload.password)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered user %s (%s)", user.id, user.username)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    # Same answer for unknown email and wrong password
    if not user or not user.check_password(payload.password):
        logger.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=400, detail="Invalid email or password")

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)

    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return ProfileResponse(user=UserRead.model_validate(current_user))


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update first name, last name and bio.
    """
    update_data = payload.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(current_user, key, value)

    db.commit()
    db.refresh(current_user)
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserRead.model_validate(current_user),
    )
