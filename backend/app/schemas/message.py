from pydantic import BaseModel, Field
from datetime import datetime


class MessageCreate(BaseModel):
    message: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    id: str
    client_id: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
