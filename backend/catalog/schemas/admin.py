from pydantic import BaseModel


class AdminVerifyResponse(BaseModel):
    success: bool
