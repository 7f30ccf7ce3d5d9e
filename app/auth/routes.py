import logging

from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.auth.models import User
from app.core.deps import get_current_user
from app.core.security import hash_password, verify_password, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =========================
# SIGNUP
# =========================
@router.post("/signup", status_code=201)
def signup(
    email: str = Form(...),
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    email = email.strip()
    username = username.strip()
    if not email or not username or not password:
        raise HTTPException(status_code=400, detail="Please enter all fields.")

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    if db.query(User).filter(User.username == username).first():
        raise HTTPException(status_code=400, detail="Username already taken")

    # Profile counters start at zero; the first rollover stamps last_rollover_date.
    user = User(
        email=email,
        username=username,
        password_hash=hash_password(password),
        total_points=0,
        total_tasks_completed=0,
        total_tasks_created=0,
        current_streak=0,
        highest_streak=0,
        daily_completion_summary={},
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("New user registered: %s (%s)", user.username, user.user_id)

    return {"msg": "User registered successfully! Please login.", "user_id": user.user_id}


# =========================
# LOGIN
# =========================
@router.post("/login")
def login(
    email_or_username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(
        or_(User.email == email_or_username, User.username == email_or_username)
    ).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info("Invalid credentials for: %s", email_or_username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user.user_id)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": {"id": user.user_id, "username": user.username, "email": user.email},
    }


# =========================
# DELETE ACCOUNT
# =========================
@router.delete("/me")
def delete_account(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete the account together with its daily records, tasks and badges."""
    username = user.username
    db.delete(user)
    db.commit()
    logger.info("Account deleted: %s", username)
    return {"msg": "Account deleted"}
