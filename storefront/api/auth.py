from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.core.auth import get_current_identity
from storefront.db.models import User
from storefront.schemas import LoginPayload, RegisterPayload, TokenResponse, UserRead
from storefront.security.utils import create_access_token, hash_password, verify_password

router = APIRouter()  # main.py mounts at {API_PREFIX}/auth


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == payload.username).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token, _ = create_access_token(user.username, user.role)
    return {"token": token, "user": UserRead.model_validate(user)}


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, db: Session = Depends(get_db)):
    taken = db.query(User).filter(
        or_(User.username == payload.username, User.email == str(payload.email))
    ).first()
    if taken:
        raise HTTPException(status_code=409, detail="Username or email already registered")
    user = User(
        username=payload.username,
        email=str(payload.email),
        password_hash=hash_password(payload.password),
        role="user",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    token, _ = create_access_token(user.username, user.role)
    return {"token": token, "user": UserRead.model_validate(user)}


@router.get("/me", response_model=UserRead)
def me(identity: dict = Depends(get_current_identity), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == identity.get("sub")).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user
