from pydantic import BaseModel, EmailStr


class MeResponse(BaseModel):
    user_id: int
    external_id: str
    email: EmailStr
    name: str
