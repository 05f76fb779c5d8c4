from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

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


class DeleteDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_url: str | None = Field(None, alias="documentUrl")
