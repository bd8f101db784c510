from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Info"])

WELCOME_TEXT = "Hello from the Restaurant API!"
ABOUT_TEXT = "This API is created by CB!"


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    return WELCOME_TEXT


@router.get("/about", response_class=PlainTextResponse)
def about() -> str:
    return ABOUT_TEXT


@router.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns a simple status response for load balancers. It does not touch
    the store.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}
