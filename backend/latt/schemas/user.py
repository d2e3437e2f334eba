"""Account Schemas: responses of the auth endpoints."""

from pydantic import BaseModel


class AccountResponse(BaseModel):
    user_id: int
    message: str
