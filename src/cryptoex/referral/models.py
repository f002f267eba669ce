"""Referral ledger models."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class ClickEntry(BaseModel):
    """A visit that arrived through a referral link."""

    timestamp: int = Field(validation_alias=AliasChoices("timestamp", "ts"))
    path: str = ""


class RegistrationEntry(BaseModel):
    """A registration attributed to a referral code."""

    timestamp: int = Field(validation_alias=AliasChoices("timestamp", "ts"))
    email: str = ""


class LedgerEntry(BaseModel):
    """Click and registration logs of one code, both newest-first."""

    clicks: list[ClickEntry] = Field(default_factory=list)
    regs: list[RegistrationEntry] = Field(default_factory=list)


class RefSummary(BaseModel):
    """Referral overview shown to the signed-in user."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ref_code: str
    ref_link: str
    clicks_count: int
    regs_count: int
    clicks_recent: list[ClickEntry]
    regs_recent: list[RegistrationEntry]


ledger_entry_adapter: TypeAdapter[LedgerEntry] = TypeAdapter(LedgerEntry)
ledger_adapter: TypeAdapter[dict[str, LedgerEntry]] = TypeAdapter(dict[str, LedgerEntry])
