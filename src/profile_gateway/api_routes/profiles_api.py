"""
Profiles API

Four endpoints over the remote ``profiles`` table:
- GET /test-db                 connectivity check, returns every row
- POST /create-profile         insert {username, bio}
- DELETE /delete-profile       delete by {username}
- PATCH /update-profile/{id}   set {bio} on one row

Every response uses the envelope {status, message, data?}. Handlers catch all
failures and render them in that envelope; no exception reaches FastAPI.
"""

import asyncio
import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..config.logfire_config import get_logger
from ..db.errors import ProfileNotFoundError
from ..services.profile_service import ProfileService

logger = get_logger(__name__)

router = APIRouter(tags=["profiles"])

UNKNOWN_ERROR = "Unknown error"


class RequestBodyError(ValueError):
    """The request body could not be read as a JSON object."""


def envelope(
    status_code: int,
    status: str,
    message: str,
    data: Any = None,
    include_data: bool = True,
) -> JSONResponse:
    """Render the {status, message, data?} response body."""
    content: dict[str, Any] = {"status": status, "message": message}
    if include_data:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=status_code, content=content)


def error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or UNKNOWN_ERROR


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    Parse the body as a JSON object.

    Bodies without a JSON content type, and empty bodies, read as {} so
    absent fields become None and are forwarded as-is.
    """
    if "json" not in request.headers.get("content-type", "").lower():
        return {}
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise RequestBodyError(f"Malformed JSON body: {e}") from e
    if not isinstance(body, dict):
        raise RequestBodyError("Request body must be a JSON object")
    return body


@router.get("/test-db")
async def test_db():
    """Verify the database handshake by reading the whole table."""
    try:
        data = await asyncio.to_thread(lambda: ProfileService().list_profiles())
        return envelope(
            200, "Connection Successful", "Your Supabase URL and Key are correct!", data
        )
    except Exception as e:
        message = error_message(e)
        logger.error("Connection Error: %s", message)
        status_code = getattr(e, "http_status", None) or 500
        return envelope(status_code, "Connection Failed", message, include_data=False)


@router.post("/create-profile")
async def create_profile(request: Request):
    """Insert a profile from {username, bio} and return the stored row."""
    try:
        body = await read_json_body(request)
        username, bio = body.get("username"), body.get("bio")
        profile = await asyncio.to_thread(
            lambda: ProfileService().create_profile(username, bio)
        )
        return envelope(201, "Success", "Profile created!", profile)
    except Exception as e:
        message = error_message(e)
        logger.error("Insert Error: %s", message)
        return envelope(400, "Error", message, include_data=False)


@router.delete("/delete-profile")
async def delete_profile(request: Request):
    """Delete all profiles matching {username}; an unknown username yields data=[]."""
    try:
        body = await read_json_body(request)
        username = body.get("username")
        deleted = await asyncio.to_thread(
            lambda: ProfileService().delete_profiles_by_username(username)
        )
        return envelope(200, "Success", f"Profile '{username}' deleted!", deleted)
    except Exception as e:
        message = error_message(e)
        logger.error("Delete Error: %s", message)
        return envelope(400, "Error", message, include_data=False)


@router.patch("/update-profile/{profile_id}")
async def update_profile(profile_id: str, request: Request):
    """Set the bio of one profile; 404 when the id matches nothing."""
    try:
        body = await read_json_body(request)
        bio = body.get("bio")
        profile = await asyncio.to_thread(
            lambda: ProfileService().update_bio(profile_id, bio)
        )
        return envelope(200, "Success", f"Profile ID {profile_id} updated!", profile)
    except ProfileNotFoundError as e:
        logger.warning("Update Error: %s", e.message)
        return envelope(404, "Error", e.message, include_data=False)
    except Exception as e:
        message = error_message(e)
        logger.error("Update Error: %s", message)
        return envelope(400, "Error", message, include_data=False)
