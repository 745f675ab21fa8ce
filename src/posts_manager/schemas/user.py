"""User and author schemas."""
from __future__ import annotations

from pydantic import Field

from .common import WireModel


class Author(WireModel):
    """Reduced user record joined into posts for table display."""

    id: int
    username: str = ""
    image: str = ""


class Address(WireModel):
    """Postal address block of a user profile."""

    address: str = ""
    city: str = ""
    state: str = ""


class Company(WireModel):
    """Employer block of a user profile."""

    name: str = ""
    title: str = ""


class User(Author):
    """Full user profile shown in the read-only author view."""

    first_name: str = ""
    last_name: str = ""
    age: int | None = None
    email: str = ""
    phone: str = ""
    address: Address = Field(default_factory=Address)
    company: Company = Field(default_factory=Company)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UsersPage(WireModel):
    """Response of ``GET /users``."""

    users: list[Author] = Field(default_factory=list)
    total: int = 0
