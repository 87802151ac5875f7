from typing import Optional

from pydantic import BaseModel, Field


class UserLogin(BaseModel):
    # 缺字段由路由层返回 400 + 明确提示
    username: Optional[str] = None
    password: Optional[str] = None


class UserInfo(BaseModel):
    id: int
    username: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    success: bool
    user: UserInfo
    access_token: str
    token_type: str


class ChangePasswordRequest(BaseModel):
    user_id: int = Field(..., alias="userId")
    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6)

    class Config:
        populate_by_name = True


class ChangePasswordForm(BaseModel):
    """后台修改密码表单：多一个确认字段"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)
    confirm_password: str

    def passwords_match(self) -> bool:
        return self.new_password == self.confirm_password


class OperationResult(BaseModel):
    success: bool
    message: Optional[str] = None
