from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..core.rate_limit import limiter
from ..core.security import create_access_token, create_refresh_token, decode_refresh_token, audit_log
from ..database import get_db
from ..dependencies import SessionContext, get_current_user, get_session_context

router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.post("/", response_model=schemas.User)
@limiter.limit("5/minute")
def create_user(
    request: Request,
    user: schemas.UserCreate,
    db: Session = Depends(get_db)
):
    if crud.get_user_by_email(db, email=user.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    if crud.get_user_by_username(db, username=user.username):
        raise HTTPException(status_code=400, detail="Username already taken")

    return crud.create_user(db=db, user=user)


@router.post("/token", response_model=schemas.Token)
@limiter.limit("10/minute")
def login_for_access_token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = crud.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        audit_log(f"Failed login for '{form_data.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, _, _ = create_access_token(data={"sub": user.username})
    refresh_token, _, _ = create_refresh_token(data={"sub": user.username})
    return schemas.Token(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.post("/token/refresh", response_model=schemas.Token)
def refresh_access_token(payload: schemas.RefreshTokenRequest, db: Session = Depends(get_db)):
    username = decode_refresh_token(payload.refresh_token)
    user = crud.get_user_by_username(db, username=username) if username else None
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, _, _ = create_access_token(data={"sub": user.username})
    refresh_token, _, _ = create_refresh_token(data={"sub": user.username})
    return schemas.Token(access_token=access_token, refresh_token=refresh_token, token_type="bearer")


@router.get("/me", response_model=schemas.UserDetail)
def read_user_me(
    current_user: models.User = Depends(get_current_user),
    session: SessionContext = Depends(get_session_context)
):
    return schemas.UserDetail(
        **schemas.User.model_validate(current_user).model_dump(),
        is_admin=session.is_admin,
    )
