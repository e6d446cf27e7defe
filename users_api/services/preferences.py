"""Accessibility preferences: one row per user, enum fields parsed strictly."""

from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from users_api.models import Preference
from users_api.models.enums import (
    AiResponseLevel,
    Language,
    ReportFormat,
    VisualTheme,
    WcagLevel,
    WcagVersion,
    parse_enum,
)
from users_api.schemas.preference import PreferenceCreate, PreferenceFields

DEFAULT_FONT_SIZE = 14

# Field name -> enum used to parse it.
_ENUM_FIELDS = {
    "wcag_version": WcagVersion,
    "wcag_level": WcagLevel,
    "language": Language,
    "visual_theme": VisualTheme,
    "report_format": ReportFormat,
    "ai_response_level": AiResponseLevel,
}


class PreferenceAlreadyExistsError(Exception):
    """The user already has a preference row."""

    def __init__(self, user_id: int) -> None:
        self.message = f"Preferences already exist for user {user_id}."
        super().__init__(self.message)


def _parsed_values(fields: PreferenceFields) -> dict[str, object]:
    """Explicitly-set fields with enum strings normalized; raises InvalidEnumValueError."""
    values: dict[str, object] = {}
    for name, value in fields.model_dump(exclude_unset=True).items():
        if name == "user_id" or value is None:
            continue
        enum_cls = _ENUM_FIELDS.get(name)
        values[name] = parse_enum(enum_cls, value).value if enum_cls else value
    return values


def get_preference_for_user(db: Session, user_id: int) -> Preference | None:
    return db.query(Preference).filter(Preference.user_id == user_id).first()


def _insert(db: Session, preference: Preference) -> Preference:
    db.add(preference)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise PreferenceAlreadyExistsError(preference.user_id) from e
    db.refresh(preference)
    return preference


def create_preference(db: Session, data: PreferenceCreate) -> Preference:
    if get_preference_for_user(db, data.user_id) is not None:
        raise PreferenceAlreadyExistsError(data.user_id)
    now = datetime.now(UTC)
    values = {
        "language": Language.ES.value,
        "visual_theme": VisualTheme.LIGHT.value,
        "report_format": ReportFormat.PDF.value,
        "notifications_enabled": True,
        "ai_response_level": AiResponseLevel.INTERMEDIATE.value,
        "font_size": DEFAULT_FONT_SIZE,
    }
    values.update(_parsed_values(data))
    return _insert(
        db,
        Preference(user_id=data.user_id, created_at=now, updated_at=now, **values),
    )


def create_default_preference(db: Session, user_id: int) -> Preference:
    """Defaults applied at registration: WCAG 2.1 AA, Spanish, light theme, PDF reports."""
    now = datetime.now(UTC)
    return _insert(
        db,
        Preference(
            user_id=user_id,
            wcag_version=WcagVersion.V2_1.value,
            wcag_level=WcagLevel.AA.value,
            language=Language.ES.value,
            visual_theme=VisualTheme.LIGHT.value,
            report_format=ReportFormat.PDF.value,
            notifications_enabled=True,
            ai_response_level=AiResponseLevel.INTERMEDIATE.value,
            font_size=DEFAULT_FONT_SIZE,
            created_at=now,
            updated_at=now,
        ),
    )


def update_preference(db: Session, preference: Preference, patch: PreferenceFields) -> Preference:
    for name, value in _parsed_values(patch).items():
        setattr(preference, name, value)
    preference.updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(preference)
    return preference


def delete_preference(db: Session, preference: Preference) -> None:
    db.delete(preference)
    db.commit()
