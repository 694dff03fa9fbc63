from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminIdentity(BaseModel):
    id: int
    username: str
    name: str


class AdminLoginResponse(BaseModel):
    success: bool = True
    admin: AdminIdentity
    access_token: str
    token_type: str = "bearer"
