"""User Domain Model"""

from pydantic import BaseModel, Field

from .enums import UserRole


class User(BaseModel):
    """团队成员

    password 为演示用明文口令，对外序列化时必须排除。
    """

    id: str = Field(description="唯一标识")
    name: str = Field(min_length=1, description="姓名")
    email: str = Field(min_length=1, description="邮箱")
    role: UserRole = Field(default=UserRole.TEAM_MEMBER, description="角色")
    department: str = Field(default="", description="部门")
    password: str = Field(default="", repr=False, description="登录口令")

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def public_view(self) -> dict:
        """去除口令后的可公开字段"""
        return self.model_dump(mode="json", exclude={"password"})
