from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

PROFILES_COLLECTION = "profiles"

# Python attribute names of the fields a profile needs before approval.
MANDATORY_PROFILE_FIELDS = (
    "full_name",
    "nick_name",
    "department",
    "hall",
    "contact_no",
    "blood_group",
)

# Stored keys written only by the upload paths, never by profile edits.
UPLOAD_MANAGED_KEYS = ("documents", "profilePhotoUrl", "familyPhotoUrl")


class PhotoType(str, Enum):
    profile = "profile"
    family = "family"

    @property
    def profile_key(self) -> str:
        return f"{self.value}PhotoUrl"


class ProfileDocument(BaseModel):
    """An uploaded verification document attached to a profile."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str
    type: str | None = None
    uploaded_at: str | None = Field(None, alias="uploadedAt")


class Profile(BaseModel):
    """Supplementary member data. Stored with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(None, alias="userId")
    full_name: str | None = Field(None, alias="fullName")
    nick_name: str | None = Field(None, alias="nickName")
    department: str | None = None
    hall: str | None = None
    contact_no: str | None = Field(None, alias="contactNo")
    blood_group: str | None = Field(None, alias="bloodGroup")
    email: str | None = None
    faculty: str | None = None
    date_of_birth: str | None = Field(None, alias="dateOfBirth")
    home_district: str | None = Field(None, alias="homeDistrict")
    show_birthday_to_members: bool | None = Field(None, alias="showBirthdayToMembers")
    show_mobile_to_members: bool | None = Field(None, alias="showMobileToMembers")
    profession: str | None = None
    workplace: str | None = None
    marital_status: str | None = Field(None, alias="maritalStatus")
    children: str | None = None
    present_address: str | None = Field(None, alias="presentAddress")
    permanent_address: str | None = Field(None, alias="permanentAddress")
    city: str | None = None
    country: str | None = None
    present_city_of_living: str | None = Field(None, alias="presentCityOfLiving")
    linkedin: str | None = None
    biography: str | None = None
    profile_photo_url: str | None = Field(None, alias="profilePhotoUrl")
    family_photo_url: str | None = Field(None, alias="familyPhotoUrl")
    documents: list[ProfileDocument] = Field(default_factory=list)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")

    @property
    def is_complete(self) -> bool:
        return all(_is_filled(getattr(self, field)) for field in MANDATORY_PROFILE_FIELDS)

    @classmethod
    def from_document(cls, data: dict | None) -> "Profile":
        return cls.model_validate(data or {})

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def _is_filled(value) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True
