# storefront/schemas/user.py
from typing import Literal

from sqlmodel import SQLModel

# App-level roles. "guest" = no token, so it is not a role here.
Role = Literal["customer", "admin"]


class Principal(SQLModel):
    """
    Identity of an authenticated caller, built from verified JWT claims.

    There is no user table: accounts live with whoever issues the tokens.
    """

    id: str
    email: str
    name: str | None = None
    role: Role = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
