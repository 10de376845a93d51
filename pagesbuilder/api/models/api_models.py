from pydantic import BaseModel


class WebhookAccepted(BaseModel):
    """Push accepted for building"""
    status: str = "accepted"
    repository: str
    branch: str


class HealthResponse(BaseModel):
    status: str = "ok"
