from pydantic import BaseModel, ConfigDict, Field

from alumni_app.models.member import MemberApplication
from alumni_app.models.profile import Profile


class ApproveMemberRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_id: str | None = Field(None, alias="memberId")


class RejectMemberRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_id: str | None = Field(None, alias="memberId")
    reason: str | None = None


class MemberWithProfile(BaseModel):
    id: str
    user_id: str | None = None
    full_name: str | None = None
    email: str | None = None
    status: str
    approved_by_admins: list[str] = Field(default_factory=list)
    approval_count: int = 0
    approved_at: str | None = None
    rejected_at: str | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None
    created_at: str | None = None
    profile: dict | None = None

    @classmethod
    def build(cls, application: MemberApplication, profile: Profile | None) -> "MemberWithProfile":
        payload = application.model_dump(mode="json")
        payload["profile"] = profile.to_document() if profile else None
        return cls.model_validate(payload)


class DirectoryEntry(BaseModel):
    id: str
    user_id: str | None = None
    full_name: str | None = None
    email: str | None = None
    status: str
    created_at: str | None = None
    profile: dict | None = None
