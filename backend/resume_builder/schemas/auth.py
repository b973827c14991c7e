from pydantic import BaseModel

from resume_builder.schemas.common import CamelModel


class SignupRequest(CamelModel):
    email: str
    password: str
    full_name: str | None = None


class UserMetadata(BaseModel):
    name: str | None


class UserResponse(BaseModel):
    id: str
    email: str
    user_metadata: UserMetadata
    created_at: str


class SignupResponse(BaseModel):
    user: UserResponse


class SigninRequest(BaseModel):
    email: str
    password: str


class SigninResponse(BaseModel):
    access_token: str
    token_type: str
    expires_in_seconds: int
    user: UserResponse


class ThrottleResponse(BaseModel):
    error: str
    retry_after_seconds: float
