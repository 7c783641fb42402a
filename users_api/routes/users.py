"""
Users API — Users Route Handlers
=================================

What:  The five CRUD endpoints under /users.
Why:   HTTP contract of the service: status codes, bodies, check order.
How:   Decodes the body, runs the field rules, delegates to UserService.
       Errors are raised as exceptions and rendered by the handlers in main.py.

Request Flow (PUT /users/{id}):
    1. Body decoded (malformed JSON → 400)
    2. Row looked up by id (absent → 404, before any field rule runs)
    3. Field rules (first failure → 400)
    4. UserService.update_user → 200 with the full updated collection

Identifiers:
    The {id} segment is taken as a string and parsed here. Values that are
    not integers in the 32-bit key range cannot match a row, so they are
    answered with 404 without querying the store.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request

from users_api.exceptions import NotFoundError, ValidationError
from users_api.schemas.user import ErrorResponse, UserResponse
from users_api.services.user_service import UserService, get_user_service
from users_api.services.validation import validate_new_user, validate_user_changes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

# Range of the INTEGER primary key column
_ID_MIN = -(2 ** 31)
_ID_MAX = 2 ** 31 - 1

# ASCII digits only; int() would also take "+5", " 5", "1_0" and other scripts' digits
_ID_PATTERN = re.compile(r"-?[0-9]+")


def parse_user_id(raw: str) -> Optional[int]:
    """Return the id as an int, or None when it cannot identify a row."""
    if _ID_PATTERN.fullmatch(raw) is None:
        return None
    user_id = int(raw)
    if not _ID_MIN <= user_id <= _ID_MAX:
        return None
    return user_id


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Decode the request body into a dict.

    Accepts application/json and application/x-www-form-urlencoded. Any
    other content type, like a missing body, is an empty dict, so the field
    rules report what is missing.

    Raises:
        ValidationError: malformed JSON, or JSON that is not an object
    """
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type == "application/x-www-form-urlencoded":
        form = await request.form()
        return dict(form)
    if media_type != "application/json":
        return {}

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"Malformed JSON in request body: {e}", field="body")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", field="body")
    return body


async def require_user(users: UserService, raw_id: str) -> int:
    """Look the row up and return its id; NotFoundError when absent."""
    user_id = parse_user_id(raw_id)
    if user_id is None or await users.get_user(user_id) is None:
        raise NotFoundError(resource_id=raw_id)
    return user_id


@router.get(
    "",
    response_model=List[UserResponse],
    responses={500: {"description": "Database error", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(
    users: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    return await users.list_users()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Get a single user by ID",
)
async def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
) -> UserResponse:
    parsed = parse_user_id(user_id)
    user = await users.get_user(parsed) if parsed is not None else None
    if user is None:
        raise NotFoundError(resource_id=user_id)
    return user


@router.post(
    "",
    status_code=201,
    response_model=List[UserResponse],
    responses={
        400: {"description": "Invalid or missing fields", "model": ErrorResponse},
        500: {"description": "Database error (including duplicates)", "model": ErrorResponse},
    },
    summary="Create a user",
    description="Creates a user and returns the full, updated list of users.",
)
async def create_user(
    body: Dict[str, Any] = Depends(read_body),
    users: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    new_user = validate_new_user(body)
    return await users.create_user(new_user)


@router.put(
    "/{user_id}",
    response_model=List[UserResponse],
    responses={
        400: {"description": "Invalid fields or empty body", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Partially update a user",
    description=(
        "Updates the supplied fields (username, email, age) and returns the "
        "full, updated list of users. Omitted fields keep their values."
    ),
)
async def update_user(
    user_id: str,
    body: Dict[str, Any] = Depends(read_body),
    users: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    existing_id = await require_user(users, user_id)
    changes = validate_user_changes(body)
    return await users.update_user(existing_id, changes)


@router.delete(
    "/{user_id}",
    response_model=List[UserResponse],
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Database error", "model": ErrorResponse},
    },
    summary="Delete a user",
    description="Deletes the user and returns the remaining list of users.",
)
async def delete_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    existing_id = await require_user(users, user_id)
    return await users.delete_user(existing_id)
