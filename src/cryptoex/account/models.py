"""Profile and exchange history models."""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

# Optional profile fields accepted by an update, in display order
PROFILE_FIELDS = ("last_name", "first_name", "middle_name", "telegram", "phone")


class Profile(BaseModel):
    """Free-form personal details of one user."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    email: str
    last_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    telegram: str = ""
    phone: str = ""

    @field_validator(*PROFILE_FIELDS, mode="before")
    @classmethod
    def blank_if_null(cls, value: Any) -> Any:
        return "" if value is None else value


def merge_profile(profile: Profile, fields: Mapping[str, Any]) -> Profile:
    """Overlay known profile fields onto an existing profile.

    Keys may be given as ``first_name`` or ``firstName``. Fields that are
    absent or ``None`` keep their current value; unknown keys and ``email``
    are ignored.

    Args:
        profile: Current profile
        fields: Partial update

    Returns:
        New merged profile
    """
    changes: dict[str, str] = {}
    for name in PROFILE_FIELDS:
        for key in (name, to_camel(name)):
            if key in fields and fields[key] is not None:
                changes[name] = str(fields[key]).strip()
                break

    return profile.model_copy(update=changes)


profile_adapter: TypeAdapter[Profile] = TypeAdapter(Profile)
profiles_adapter: TypeAdapter[dict[str, Profile]] = TypeAdapter(dict[str, Profile])
history_entry_adapter: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])
history_adapter: TypeAdapter[list[dict[str, Any]]] = TypeAdapter(list[dict[str, Any]])
