"""Pydantic schemas for declarative command rule definitions."""
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from dress_checklist.models import Mode, Outcome


class OutcomeDefinition(BaseModel):
    """One response of a command rule for a given mode."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mode: Mode = Field(
        Mode.NONE,
        validation_alias=AliasChoices("mode", "type"),
        description="Mode this response applies to",
    )
    message: str = Field("", description="Message emitted when the item is valid")
    error: bool = Field(False, description="Item is not allowed in this mode")
    requires: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("requires", "required_items"),
        description="Identifiers that must come earlier on the line",
    )

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if value is None:
            return Mode.NONE
        if isinstance(value, Mode):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return Mode(value)
        return Mode.parse(str(value))

    @field_validator("message", mode="before")
    @classmethod
    def _none_message(cls, value):
        return "" if value is None else value

    @field_validator("requires", mode="before")
    @classmethod
    def _none_requires(cls, value):
        return [] if value is None else value

    def to_outcome(self) -> Outcome:
        return Outcome(
            mode=self.mode,
            message=self.message,
            is_error=self.error,
            prerequisites=frozenset(self.requires),
        )


class RuleDefinition(BaseModel):
    """
    A command rule: unique identifier plus its per-mode responses.

    Empty names and empty outcome lists are accepted here; the rule table
    build rejects them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., description="Unique command identifier")
    name: str = Field("", description="Command name")
    description: str = Field("", description="Optional description")
    outcomes: List[OutcomeDefinition] = Field(
        default_factory=list,
        validation_alias=AliasChoices("outcomes", "responses"),
    )

    @field_validator("name", "description", mode="before")
    @classmethod
    def _none_text(cls, value):
        return "" if value is None else value

    @field_validator("outcomes", mode="before")
    @classmethod
    def _none_outcomes(cls, value):
        return [] if value is None else value


class RuleDocument(BaseModel):
    """Top-level rule file."""
    version: str = "1.0"
    rules: List[RuleDefinition] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_text(cls, value):
        return "1.0" if value is None else str(value)
