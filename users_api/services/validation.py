"""
Users API — Field Validation Rules
===================================

What:  The field rules for user bodies and the order they are checked in.
Why:   Clients get exactly one message per rejected request: the first rule
       that fails. The rule order is part of the API contract.
How:   Plain functions over the decoded body; each returns a validated
       schema object or raises ValidationError (→ 400).

Create order:
    1. username, email and age all present and truthy
    2. username length within 3-20
    3. age a finite number, at most 130
    4. email matches local@domain.tld

Update order (each rule only for fields that are present and truthy):
    username length → age → email → at least one field supplied
"""

import math
import re
from typing import Any, Mapping

from users_api.exceptions import ValidationError
from users_api.schemas.user import UserCreate, UserUpdate

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
AGE_MAX = 130

# Non-whitespace local part, a single @, and a dot somewhere after it
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Plain decimal notation only; no exponents, underscores or non-ASCII digits
NUMBER_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")

REQUIRED_FIELDS_MESSAGE = "Username, email, and age are required fields"
USERNAME_LENGTH_MESSAGE = "Username too long or too short (3-20 char limit)"
AGE_TOO_HIGH_MESSAGE = "Age value too high (max. 130)"
AGE_TYPE_MESSAGE = "Age must be a number"
EMAIL_MESSAGE = "Invalid email address"
NO_INPUT_MESSAGE = "No input provided: provide either username, email, age or all of these"


def check_username(value: Any) -> str:
    if not isinstance(value, str) or not (
        USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH
    ):
        raise ValidationError(USERNAME_LENGTH_MESSAGE, field="username")
    return value


def check_age(value: Any) -> float:
    """
    Coerce and bound-check an age.

    Accepts any finite JSON number and numeric strings, the latter being
    what urlencoded form bodies carry. Negative ages are not rejected; only
    the upper bound is part of the contract.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(AGE_TYPE_MESSAGE, field="age")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(AGE_TYPE_MESSAGE, field="age")
    if isinstance(value, str):
        value = value.strip()
        if NUMBER_PATTERN.fullmatch(value) is None:
            raise ValidationError(AGE_TYPE_MESSAGE, field="age")
        value = float(value)

    if value > AGE_MAX:
        raise ValidationError(AGE_TOO_HIGH_MESSAGE, field="age")

    # Very large negative integers and digit strings do not fit a float
    try:
        age = float(value)
    except OverflowError:
        raise ValidationError(AGE_TYPE_MESSAGE, field="age")
    if not math.isfinite(age):
        raise ValidationError(AGE_TYPE_MESSAGE, field="age")
    return age


def check_email(value: Any) -> str:
    if not isinstance(value, str) or EMAIL_PATTERN.fullmatch(value) is None:
        raise ValidationError(EMAIL_MESSAGE, field="email")
    return value


def validate_new_user(body: Mapping[str, Any]) -> UserCreate:
    """
    Validate a POST /users body.

    Raises:
        ValidationError: with the message of the first failing rule
    """
    username = body.get("username")
    email = body.get("email")
    age = body.get("age")

    if not username or not email or not age:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    return UserCreate(
        username=check_username(username),
        age=check_age(age),
        email=check_email(email),
    )


def validate_user_changes(body: Mapping[str, Any]) -> UserUpdate:
    """
    Validate a PUT /users/{id} body.

    Falsy values ("" / 0 / null) count as absent, so they neither fail a
    rule nor overwrite the stored value.

    Raises:
        ValidationError: with the message of the first failing rule, or
            NO_INPUT_MESSAGE when none of the three fields is supplied
    """
    username = body.get("username")
    email = body.get("email")
    age = body.get("age")

    changes = UserUpdate()
    if username:
        changes.username = check_username(username)
    if age:
        changes.age = check_age(age)
    if email:
        changes.email = check_email(email)

    if not username and not age and not email:
        raise ValidationError(NO_INPUT_MESSAGE)

    return changes
