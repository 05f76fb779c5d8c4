from enum import Enum

from pydantic import BaseModel, Field, field_validator

MEMBERS_COLLECTION = "members"


class MemberStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class MemberApplication(BaseModel):
    """A membership request and the admin votes recorded against it."""

    id: str
    user_id: str | None = None
    full_name: str | None = None
    email: str | None = None
    status: MemberStatus = MemberStatus.pending
    approved_by_admins: list[str] = Field(default_factory=list)
    approval_count: int = 0
    approved_at: str | None = None
    rejected_at: str | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, value):
        return value or MemberStatus.pending

    @field_validator("approved_by_admins", mode="before")
    @classmethod
    def default_approvers(cls, value):
        return list(value or [])

    @classmethod
    def from_document(cls, doc_id: str, data: dict | None) -> "MemberApplication":
        return cls.model_validate({**(data or {}), "id": doc_id})

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"})
