"""Authentication models for user accounts."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from cryptoex.errors import AuthError, AuthErrorCode


class UserRecord(BaseModel):
    """Stored user account.

    ``email`` keeps the casing it was registered with; comparisons are
    case-insensitive. ``ref_code`` may be blank on records written before
    referral codes existed and is backfilled on first use.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    password_hash: str = Field(
        default="",
        validation_alias=AliasChoices("passwordHash", "passHash", "password_hash"),
        serialization_alias="passwordHash",
    )
    ref_code: str = ""
    referred_by: str = ""

    @field_validator("password_hash", "ref_code", "referred_by", mode="before")
    @classmethod
    def blank_if_null(cls, value: Any) -> Any:
        return "" if value is None else value

    def matches(self, email: str) -> bool:
        return self.email.lower() == email.strip().lower()


class CurrentUser(BaseModel):
    """Public view of the signed-in user."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    email: str
    ref_code: str = ""


class Result(BaseModel):
    """Outcome of an operation exposed to the UI layer."""

    ok: bool
    message: str | None = None
    error: AuthErrorCode | None = None
    data: Any = None

    @classmethod
    def success(cls, data: Any = None) -> "Result":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, exc: AuthError) -> "Result":
        return cls(ok=False, message=exc.message, error=exc.code)


user_adapter: TypeAdapter[UserRecord] = TypeAdapter(UserRecord)
users_adapter: TypeAdapter[list[UserRecord]] = TypeAdapter(list[UserRecord])
