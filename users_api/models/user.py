"""
Users API — User SQLAlchemy Model
==================================

What:  ORM model representing the `Users` table.
Why:   Lets the persistence layer build parameterized statements from typed
       column objects instead of SQL strings.
Who:   Used by UserService for CRUD statements and by Database.create_tables.

Table Design:
    - id: integer primary key generated by the store on insert
    - username: VARCHAR(20) matches the API's 20 character limit
    - email: VARCHAR(255)
    - age: floating point (fractional ages are accepted)
    username and email are unique, so a duplicate insert fails in the store
    (surfaced to clients as a database error, not a validation error).

Field rules (length, pattern, maximum age) live in services/validation.py;
the table itself only guarantees presence and uniqueness.
"""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """One row of the Users relation."""

    __tablename__ = "Users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    age: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
