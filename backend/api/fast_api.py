"""
FastAPI Router — Root
=====================

Purpose
-------
Defines the HTTP surface of the backend: one static route that confirms the
service is up. The database pool opened at startup is available on
``request.app.state.db_pool`` for routes that need it.
"""

from fastapi import APIRouter

from backend.api.models import WelcomeMessage

WELCOME_MESSAGE = "Welcome to Rangkai Edu Backend API"

router = APIRouter()
"""Creates the FastAPI router in which we define its routes"""


@router.get('/', response_model=WelcomeMessage)
async def root() -> WelcomeMessage:
    """Return the static welcome payload.

    Response:
        200: {'message': 'Welcome to Rangkai Edu Backend API'}
    """
    return WelcomeMessage(message=WELCOME_MESSAGE)
