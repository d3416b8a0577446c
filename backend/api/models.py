"""
Pydantic models used for response validation and API data contracts.
"""

from pydantic import BaseModel, Field


class WelcomeMessage(BaseModel):
    """Body returned by the root endpoint."""
    message: str = Field(..., description="Static greeting identifying the service.", examples=["Welcome to Rangkai Edu Backend API"])
