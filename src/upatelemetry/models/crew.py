"""Crew manifest models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from upatelemetry.ingestion.normalize import safe_int


class CrewMember(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    craft: str = ""

    @field_validator("name", "craft", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @property
    def is_iss(self) -> bool:
        return "iss" in self.craft.lower()


class CrewManifest(BaseModel):
    """People currently aboard the ISS, plus the total count in space."""

    model_config = ConfigDict(frozen=True)

    iss_crew_count: int
    total_in_space: int
    crew: tuple[CrewMember, ...] = ()


class AstrosPayload(BaseModel):
    """Open Notify ``astros.json``: ``{"number": N, "people": [...]}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    number: int | None = None
    people: list[CrewMember] = Field(default_factory=list)

    @field_validator("number", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("people", mode="before")
    @classmethod
    def _coerce_people(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]

    def to_manifest(self) -> CrewManifest:
        iss_crew = tuple(person for person in self.people if person.is_iss)
        total = self.number if self.number is not None else len(self.people)
        return CrewManifest(iss_crew_count=len(iss_crew), total_in_space=total, crew=iss_crew)
