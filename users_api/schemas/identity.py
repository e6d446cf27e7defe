"""Per-request caller identity."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

IdentitySource = Literal["anonymous", "gateway", "jwt", "session"]

# Ids are stored in a signed 32-bit INTEGER column.
MAX_USER_ID = 2**31 - 1


def parse_user_id(raw: str) -> int | None:
    """Integer user id in 1..MAX_USER_ID, or None for anything else."""
    try:
        user_id = int(raw.strip())
    except ValueError:
        return None
    if not 0 < user_id <= MAX_USER_ID:
        return None
    return user_id


class IdentityContext(BaseModel):
    """
    Who is calling, built once per request and never mutated afterwards.

    user_id 0 means anonymous. source records which path populated it.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int = 0
    email: str = ""
    role: str = ""
    user_name: str = ""
    source: IdentitySource = "anonymous"

    @property
    def is_authenticated(self) -> bool:
        return self.user_id > 0

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == "admin"


ANONYMOUS = IdentityContext()
