from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """
    Body of every error response.
    """

    message: str


class HealthResponse(BaseModel):
    status: str
    database: str
    timestamp: datetime
