from pydantic import BaseModel, ConfigDict, Field

from shipspace.schemas.rating import ReputationSummaryOut


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    company_name: str = Field(min_length=1, max_length=200)
    contact_person: str = Field(min_length=1, max_length=200)
    phone: str = Field(min_length=1, max_length=40)


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_name: str
    contact_person: str
    phone: str
    is_admin: bool


class UserPageOut(BaseModel):
    profile: ProfileOut
    reputation: ReputationSummaryOut


class UserBootstrap(BaseModel):
    company_name: str
    contact_person: str
    phone: str
    is_admin: bool = False


class UserBootstrapOut(BaseModel):
    user_id: str
    api_key: str
