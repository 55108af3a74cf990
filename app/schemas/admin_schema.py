from pydantic import BaseModel


class DashboardStats(BaseModel):
    users: int
    properties: int
    messages: int
    requests: int


class MessageResponse(BaseModel):
    message: str
