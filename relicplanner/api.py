"""Build optimization endpoint.

The request carries the inventory and constraints; taxonomy, skill overrides
and characters come from the bundled reference data. Naming a ``character``
applies that character's slot layout as category quotas and (unless
``include_other_equipped``) hides relics equipped by other characters.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, ValidationError

from relicplanner.config import settings
from relicplanner.data import GameData, get_game_data
from relicplanner.errors import SolverError
from relicplanner.models import (
    BuildConstraints, BuildResult, DollBonus, Relic, SolveRequest,
)
from relicplanner.solver import RelicSolver


GameDataDep = Annotated[GameData, Depends(get_game_data)]

router = APIRouter(prefix="/optimize", tags=["optimize"])


class OptimizeRequest(BaseModel):
    relics: list[Relic] = Field(default_factory=list)
    constraints: BuildConstraints = Field(default_factory=BuildConstraints)
    character: str | None = None
    include_other_equipped: bool = False


class DollInfo(BaseModel):
    name: str
    allowed_slots: dict[str, int]
    bonuses: list[DollBonus]


class SkillInfo(BaseModel):
    name: str
    category: str
    max_level: int
    description: str


def _to_solve_request(req: OptimizeRequest, gd: GameData) -> SolveRequest:
    doll = None
    if req.character is not None:
        doll = gd.get_doll(req.character)
        if doll is None:
            raise HTTPException(
                status_code=422,
                detail=f"Unknown character '{req.character}'. "
                       f"Valid names: {gd.get_doll_names()}",
            )
    try:
        return SolveRequest(
            relics=req.relics,
            constraints=req.constraints,
            taxonomy=gd.taxonomy,
            skill_overrides=gd.skill_overrides,
            doll=doll,
            include_other_equipped=req.include_other_equipped,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(
            include_url=False, include_context=False, include_input=False)) from e


@router.post("/", response_model=list[BuildResult])
def run_optimize(req: OptimizeRequest, gd: GameDataDep) -> list[BuildResult]:
    """Run the build optimizer and return ranked BuildResults.

    ```json
    {
      "relics": [{"type": "Bulwark", "main_skill": {"name": "Fortress", "level": 3},
                  "aux_skills": [{"name": "HP Boost", "level": 2}]}],
      "constraints": {"targetCategoryLevels": {"Bulwark": 12}},
      "character": "Groza"
    }
    ```
    """
    if len(req.relics) > settings.max_relics_per_optimize:
        raise HTTPException(
            status_code=422,
            detail=f"Too many relics (max {settings.max_relics_per_optimize}).",
        )
    solve_request = _to_solve_request(req, gd)
    try:
        return RelicSolver.from_request(solve_request).solve()
    except SolverError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@router.get("/dolls", response_model=list[DollInfo])
def list_dolls(gd: GameDataDep) -> list[DollInfo]:
    return [DollInfo(**gd.dolls[name].model_dump()) for name in gd.get_doll_names()]


@router.get("/skills", response_model=list[SkillInfo])
def list_skills(gd: GameDataDep) -> list[SkillInfo]:
    """Every categorized skill with its cap and description at that cap."""
    index = gd.build_index()
    return [
        SkillInfo(
            name=name,
            category=index.category_of(name),
            max_level=index.max_level(name),
            description=index.describe(name, index.max_level(name)),
        )
        for name in index
    ]


def create_app() -> FastAPI:
    app = FastAPI(title="relicplanner")
    app.include_router(router, prefix="/api/v1")
    return app
