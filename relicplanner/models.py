"""Pydantic models for relics, constraints, taxonomy and solver results.

These are the FastAPI-ready schemas; keep field names stable. Input models
also accept the field names used by the reference JSON data files
(``type``, ``main_skill``, ``aux_skills``, ``targetCategoryLevels`` ...).
"""
from typing import Any, Optional

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, Field, computed_field, model_validator,
)

from relicplanner.constants import BUILD_SIZE, MAX_SECONDARIES


# ---------------------------------------------------------------------------
# Relic models
# ---------------------------------------------------------------------------

class SkillRoll(BaseModel):
    """One named skill on a relic at a given level."""
    model_config = ConfigDict(frozen=True)

    name: str
    level: int = Field(ge=0)

    @property
    def key(self) -> str:
        return f"{self.name}:{self.level}"


class Relic(BaseModel):
    """An inventory relic. Read-only for the duration of a solve."""
    model_config = ConfigDict(frozen=True)

    id: str | int | None = None
    category: str = Field(validation_alias=AliasChoices("category", "type"))
    rarity: str = ""
    primary: SkillRoll = Field(validation_alias=AliasChoices("primary", "main_skill"))
    secondaries: list[SkillRoll] = Field(
        default_factory=list, max_length=MAX_SECONDARIES,
        validation_alias=AliasChoices("secondaries", "aux_skills"))
    total_level: int = 0
    equipped: str | None = None  # name of the character currently using it

    @model_validator(mode="before")
    @classmethod
    def fill_total_level(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("total_level") is not None:
            return data
        data = dict(data)
        primary = data.get("primary", data.get("main_skill"))
        secondaries = data.get("secondaries", data.get("aux_skills")) or []
        total = 0
        for skill in [primary, *secondaries]:
            if isinstance(skill, SkillRoll):
                total += skill.level
            elif isinstance(skill, dict):
                total += int(skill.get("level", 0))
        data["total_level"] = total
        return data

    @property
    def skills(self) -> list[SkillRoll]:
        return [self.primary, *self.secondaries]


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

_Levels = dict[str, int]


class BuildConstraints(BaseModel):
    """Minimum aggregate levels and per-category relic quotas for a build."""
    model_config = ConfigDict(frozen=True)

    category_minimums: _Levels = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "category_minimums", "categoryMinimums", "targetCategoryLevels"))
    skill_minimums: _Levels = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "skill_minimums", "skillMinimums", "targetSkillLevels"))
    category_quotas: Optional[_Levels] = Field(
        default=None,
        validation_alias=AliasChoices(
            "category_quotas", "categoryQuotas", "allowedSlots"))

    @model_validator(mode="after")
    def check_non_negative(self) -> "BuildConstraints":
        for label, table in (("category minimum", self.category_minimums),
                             ("skill minimum", self.skill_minimums),
                             ("category quota", self.category_quotas or {})):
            for key, value in table.items():
                if value < 0:
                    raise ValueError(f"{label} for '{key}' is negative ({value})")
        return self

    def quota_for(self, category: str) -> int | None:
        """Max relics of ``category`` per build; None when quotas are off."""
        if self.category_quotas is None:
            return None
        return self.category_quotas.get(category, 0)

    def with_quotas(self, quotas: _Levels) -> "BuildConstraints":
        return self.model_copy(update={"category_quotas": dict(quotas)})


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class CategoryTaxonomy(BaseModel):
    """Skills that belong to one relic category."""
    primary_skills: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("primary_skills", "main_skills"))
    # name template (may contain "{Element}") -> max level
    secondary_skills: dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("secondary_skills", "aux_skills"))


class Taxonomy(BaseModel):
    categories: dict[str, CategoryTaxonomy] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("categories", "RELIC_TYPES"))
    elements: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("elements", "ELEMENTS"))


class SkillOverride(BaseModel):
    """Explicit category / max level for a skill name; wins over the taxonomy."""
    category: str = Field(validation_alias=AliasChoices("category", "type"))
    max_level: int = Field(ge=0, validation_alias=AliasChoices("max_level", "maxlevel"))
    description: str | None = None


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------

class DollBonus(BaseModel):
    """Set bonus unlocked once every category threshold is reached."""
    tier: int
    description: str = ""
    thresholds: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_thresholds(cls, data: Any) -> Any:
        # Reference data stores thresholds as extra numeric keys: {"Bulwark": 2, ...}
        if not isinstance(data, dict) or "thresholds" in data:
            return data
        thresholds = {
            k: v for k, v in data.items()
            if k not in ("tier", "description") and isinstance(v, int)
        }
        return {"tier": data.get("tier"), "description": data.get("description", ""),
                "thresholds": thresholds}

    def is_met(self, category_levels: dict[str, int]) -> bool:
        return all(category_levels.get(cat, 0) >= need
                   for cat, need in self.thresholds.items())


class Doll(BaseModel):
    """A character that equips a build."""
    name: str
    allowed_slots: dict[str, int] = Field(default_factory=dict)
    bonuses: list[DollBonus] = Field(default_factory=list)

    def active_bonuses(self, result: "BuildResult") -> list[DollBonus]:
        return [b for b in self.bonuses if b.is_met(result.raw_category_levels)]


# ---------------------------------------------------------------------------
# Solver input / output
# ---------------------------------------------------------------------------

class SolveRequest(BaseModel):
    """Everything a single solve call needs. Stable API schema."""
    relics: list[Relic] = Field(default_factory=list)
    constraints: BuildConstraints = Field(default_factory=BuildConstraints)
    taxonomy: Taxonomy = Field(default_factory=Taxonomy)
    skill_overrides: dict[str, SkillOverride] = Field(default_factory=dict)
    doll: Doll | None = None
    include_other_equipped: bool = False

    @model_validator(mode="after")
    def check_known_categories(self) -> "SolveRequest":
        known = set(self.taxonomy.categories)
        known.update(o.category for o in self.skill_overrides.values())
        if not known:
            return self
        c = self.constraints
        named = set(c.category_minimums) | set(c.category_quotas or {})
        if self.doll is not None:
            named.update(self.doll.allowed_slots)
        unknown = sorted(named - known)
        if unknown:
            raise ValueError(
                f"Unknown categories {unknown}. Valid names: {sorted(known)}")
        return self

    def effective_constraints(self) -> BuildConstraints:
        """Constraints with the doll's slot layout applied as quotas."""
        if self.doll is None:
            return self.constraints
        return self.constraints.with_quotas(self.doll.allowed_slots)

    def eligible_relics(self) -> list[Relic]:
        """Inventory minus relics equipped by other characters (unless allowed)."""
        if self.doll is None or self.include_other_equipped:
            return list(self.relics)
        return [r for r in self.relics
                if not r.equipped or r.equipped == self.doll.name]


class BuildResult(BaseModel):
    """One accepted build. Ready as FastAPI response."""
    relics: list[Relic] = Field(min_length=BUILD_SIZE, max_length=BUILD_SIZE)
    raw_category_levels: dict[str, int]
    raw_skill_levels: dict[str, int]
    effective_skill_levels: dict[str, int]
    # set bonuses of the requested character that this build unlocks
    active_bonuses: list[DollBonus] = Field(default_factory=list)

    @computed_field
    @property
    def total_raw_level(self) -> int:
        return sum(self.raw_skill_levels.values())

    @computed_field
    @property
    def total_effective_level(self) -> int:
        return sum(self.effective_skill_levels.values())
