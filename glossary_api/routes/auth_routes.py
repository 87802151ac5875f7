import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from glossary_backend.app.core.database import get_db
from glossary_backend.app.models.user import User
from glossary_backend.app.schemas import (
    ChangePasswordRequest, LoginResponse, OperationResult, UserInfo, UserLogin
)
from glossary_api import crud
from glossary_api.routes.auth_utils import create_user_token, get_current_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


# 用户登录接口
@router.post("/login", response_model=LoginResponse)
def login(user: UserLogin, db: Session = Depends(get_db)):
    if not user.username or not user.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    db_user = crud.authenticate_user(db, user.username, user.password)
    if not db_user:
        logger.warning("Failed login attempt for username=%r", user.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    return {
        "success": True,
        "user": {"id": db_user.id, "username": db_user.username},
        "access_token": create_user_token(db_user),
        "token_type": "bearer",
    }


# 修改密码：必须提供当前密码
@router.post("/change-password", response_model=OperationResult)
def change_password(payload: ChangePasswordRequest, db: Session = Depends(get_db)):
    db_user = crud.get_user(db, payload.user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    if not verify_password(payload.current_password, db_user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect"
        )

    crud.update_user_password(db, db_user.id, payload.new_password)
    logger.info("Password changed for user id=%s", db_user.id)
    return {"success": True, "message": "Password updated successfully"}


@router.get("/me", response_model=UserInfo)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user
