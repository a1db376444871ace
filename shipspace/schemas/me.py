from pydantic import BaseModel


class MeOut(BaseModel):
    user_id: str | None
    is_admin: bool
