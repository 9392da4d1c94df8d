"""Solver settings.

Defaults come from ``relicplanner.constants``; any field can be overridden
through ``RELICPLANNER_*`` environment variables (nested fields use ``__``,
e.g. ``RELICPLANNER_SHAPE__MAX_SECONDARIES=3``) or passed explicitly per call.
"""
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from relicplanner.constants import (
    CANDIDATE_FLOOR, CANDIDATES_PER_CATEGORY, CATEGORY_MATCH_WEIGHT,
    DEFAULT_MAX_LEVEL, MAX_BUILDS, MAX_PRIMARY_LEVEL, MAX_SECONDARIES,
    MAX_SECONDARY_LEVEL, SKILL_MATCH_WEIGHT,
)


class RelicShape(BaseModel):
    """Composition rule for a single relic."""
    model_config = ConfigDict(frozen=True)

    max_primary_level: int = Field(default=MAX_PRIMARY_LEVEL, ge=0)
    max_secondary_level: int = Field(default=MAX_SECONDARY_LEVEL, ge=0)
    max_secondaries: int = Field(default=MAX_SECONDARIES, ge=0)

    @computed_field
    @property
    def max_contribution(self) -> int:
        """Most levels one relic can add to any single category."""
        return self.max_primary_level + self.max_secondaries * self.max_secondary_level


class SolverSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RELICPLANNER_",
        env_nested_delimiter="__",
        frozen=True,
    )

    max_results: int = Field(default=MAX_BUILDS, ge=1)
    candidates_per_category: int = Field(default=CANDIDATES_PER_CATEGORY, ge=1)
    candidate_floor: int = Field(default=CANDIDATE_FLOOR, ge=0)
    category_weight: int = Field(default=CATEGORY_MATCH_WEIGHT, ge=0)
    skill_weight: int = Field(default=SKILL_MATCH_WEIGHT, ge=0)
    default_max_level: int = Field(default=DEFAULT_MAX_LEVEL, ge=0)
    max_relics_per_optimize: int = Field(default=5000, ge=1)
    shape: RelicShape = Field(default_factory=RelicShape)

    @model_validator(mode="after")
    def check_weights(self) -> "SolverSettings":
        if self.skill_weight <= self.category_weight:
            raise ValueError(
                f"skill_weight ({self.skill_weight}) must be greater than "
                f"category_weight ({self.category_weight})"
            )
        return self


settings = SolverSettings()
