from enum import Enum

from pydantic import BaseModel, Field, field_validator

from alumni_app.models.member import MemberStatus

USERS_COLLECTION = "users"
ROLES_COLLECTION = "user_roles"


class Role(str, Enum):
    user = "user"
    admin = "admin"


def _coerce_role(value):
    if isinstance(value, Role):
        return value
    if isinstance(value, str) and value.strip().lower() == Role.admin.value:
        return Role.admin
    return Role.user


class Account(BaseModel):
    """Authenticated identity, keyed by the identity-provider uid."""

    id: str
    email: str | None = None
    role: Role = Role.user
    profile_complete: bool = False
    approved_by_admins: list[str] = Field(default_factory=list)
    approval_count: int = 0
    approval_status: MemberStatus = MemberStatus.pending
    approved_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        return _coerce_role(value)

    @field_validator("approval_status", mode="before")
    @classmethod
    def default_status(cls, value):
        return value or MemberStatus.pending

    @classmethod
    def from_document(cls, doc_id: str, data: dict | None) -> "Account":
        return cls.model_validate({**(data or {}), "id": doc_id})

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"})


class RoleAssignment(BaseModel):
    """Legacy role row from the older schema, kept only for migration."""

    id: str
    user_id: str
    role: Role = Role.user

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        return _coerce_role(value)

    @classmethod
    def from_document(cls, doc_id: str, data: dict | None) -> "RoleAssignment":
        return cls.model_validate({**(data or {}), "id": doc_id})
