"""Closed value sets stored as strings, with a strict parser."""

from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)


class InvalidEnumValueError(ValueError):
    """Raised when a string does not name any member of the target enum."""

    def __init__(self, enum_cls: type[Enum], value: object) -> None:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        self.message = f"Invalid {enum_cls.__name__} '{value}'. Allowed: {allowed}."
        super().__init__(self.message)


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class WcagVersion(str, Enum):
    V2_0 = "2.0"
    V2_1 = "2.1"
    V2_2 = "2.2"


class WcagLevel(str, Enum):
    A = "A"
    AA = "AA"
    AAA = "AAA"


class Language(str, Enum):
    ES = "es"
    EN = "en"


class VisualTheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ReportFormat(str, Enum):
    PDF = "pdf"
    HTML = "html"
    JSON = "json"
    EXCEL = "excel"


class AiResponseLevel(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    DETAILED = "detailed"


def parse_enum(enum_cls: type[E], value: str | None) -> E:
    """
    Map a stored or client-supplied string to a member of enum_cls.

    Matches on value, case-insensitively (e.g. "Admin" -> UserRole.ADMIN, "aa" -> WcagLevel.AA).
    Never falls back to a default: unknown or missing input raises InvalidEnumValueError.
    """
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise InvalidEnumValueError(enum_cls, value)
    wanted = value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == wanted:
            return member
    raise InvalidEnumValueError(enum_cls, value)
