"""FastAPI web server exposing roster queries, type coverage and saved teams."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, Dict, List, Optional, Protocol

from fastapi import Depends, FastAPI, Header, HTTPException, Path, Query, Request
from pydantic import BaseModel, Field

from .analysis import PokemonNotFoundError, TypeMatrixUnavailable
from .config import configure_logging, load_settings
from .models import RosterFilters, TeamSlot
from .services import (
    TeamAccessDeniedError,
    TeamNotFoundError,
    TeamServiceError,
    TeamValidationError,
)
from .services.context import PartyContext, create_context

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Opaque authentication collaborator: maps a bearer token to a user id."""

    def verify(self, token: str) -> Optional[str]: ...


# Pydantic models for request/response
class AnalyzeTeamRequest(BaseModel):
    """Request model for the type coverage endpoint."""

    pokemonIds: List[Annotated[int, Field(ge=1)]] = Field(min_length=1, max_length=6)


class AnalyzeTeamResponse(BaseModel):
    defensive: Dict[str, float]
    weaknessCount: int
    resistanceCount: int
    immunityCount: int


class TeamSlotRequest(BaseModel):
    pokemonId: int = Field(ge=1)
    position: int = Field(ge=0, le=5)


class CreateTeamRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    isPublic: bool = False
    pokemon: List[TeamSlotRequest] = Field(default_factory=list, max_length=6)


class UpdateTeamRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    isPublic: Optional[bool] = None
    pokemon: Optional[List[TeamSlotRequest]] = Field(default=None, max_length=6)


def _to_slots(entries: List[TeamSlotRequest]) -> List[TeamSlot]:
    return [TeamSlot(pokemon_id=entry.pokemonId, position=entry.position) for entry in entries]


def _team_error(exc: TeamServiceError) -> HTTPException:
    if isinstance(exc, TeamNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, TeamAccessDeniedError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, TeamValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def create_app(
    context: Optional[PartyContext] = None,
    *,
    identity_provider: Optional[IdentityProvider] = None,
) -> FastAPI:
    """Build the FastAPI app around a (possibly not yet built) context."""

    context = context or create_context()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Serve only once both caches exist; a matrix failure aborts startup.
        await context.ensure_ready()
        yield

    app = FastAPI(
        title="Poke-Party Web API",
        description="Pokemon roster browsing and team type-coverage analysis",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.identity_provider = identity_provider

    def get_context(request: Request) -> PartyContext:
        return request.app.state.context

    def current_user(
        request: Request,
        authorization: Optional[str] = Header(default=None),
    ) -> str:
        provider: Optional[IdentityProvider] = request.app.state.identity_provider
        if provider is None:
            raise HTTPException(status_code=503, detail="Authentication is not configured")
        if not authorization or not authorization.lower().startswith("bearer "):
            raise HTTPException(status_code=401, detail="Unauthorized")
        user_id = provider.verify(authorization.split(" ", 1)[1].strip())
        if not user_id:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return user_id

    @app.get("/health")
    async def health_check(ctx: PartyContext = Depends(get_context)) -> Dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy" if ctx.is_ready else "starting",
            "pokemon": len(ctx.roster),
            "typeMatrix": ctx.matrix.is_ready,
        }

    @app.get("/api/pokemon")
    async def list_pokemon(
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1),
        generation: Optional[int] = Query(None, description="Generation number (1-9)"),
        types: Optional[str] = Query(None, alias="type", description="Comma-separated, e.g. fire,flying"),
        search: Optional[str] = Query(None, description="Substring of the English or localized name"),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        """Paginated, filtered roster list served from the in-memory cache."""
        filters = RosterFilters(
            page=page, limit=limit, generation=generation, types=types, search=search
        )
        return ctx.query.get_list(filters).to_payload()

    @app.get("/api/pokemon/{pokemon_id}")
    async def get_pokemon(
        pokemon_id: int = Path(..., ge=1),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        """Live detail lookup including abilities, height and weight."""
        detail = await ctx.query.get_detail(pokemon_id)
        if detail is None:
            raise HTTPException(status_code=404, detail=f"Pokemon with id {pokemon_id} not found")
        return detail.to_payload()

    @app.post("/api/types/analyze", response_model=AnalyzeTeamResponse)
    async def analyze_team(
        request: AnalyzeTeamRequest,
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        """Worst-case defensive multiplier per attacking type for the team."""
        try:
            coverage = ctx.analyzer.analyze(request.pokemonIds)
        except PokemonNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        except TypeMatrixUnavailable as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        return coverage.to_payload()

    @app.get("/api/teams/share/{share_id}")
    async def get_shared_team(
        share_id: str, ctx: PartyContext = Depends(get_context)
    ) -> Dict[str, Any]:
        try:
            return ctx.teams.get_shared(share_id).to_payload()
        except TeamServiceError as exc:
            raise _team_error(exc)

    @app.post("/api/teams", status_code=201)
    async def create_team(
        request: CreateTeamRequest,
        user_id: str = Depends(current_user),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        try:
            team = ctx.teams.create(
                user_id, request.name, _to_slots(request.pokemon), is_public=request.isPublic
            )
        except TeamServiceError as exc:
            raise _team_error(exc)
        return team.to_payload()

    @app.get("/api/teams")
    async def list_teams(
        user_id: str = Depends(current_user),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        return {"teams": [team.to_payload() for team in ctx.teams.list_for_user(user_id)]}

    @app.get("/api/teams/{team_id}")
    async def get_team(
        team_id: str,
        user_id: str = Depends(current_user),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        try:
            return ctx.teams.get(team_id, user_id).to_payload()
        except TeamServiceError as exc:
            raise _team_error(exc)

    @app.put("/api/teams/{team_id}")
    async def update_team(
        team_id: str,
        request: UpdateTeamRequest,
        user_id: str = Depends(current_user),
        ctx: PartyContext = Depends(get_context),
    ) -> Dict[str, Any]:
        try:
            team = ctx.teams.update(
                team_id,
                user_id,
                name=request.name,
                is_public=request.isPublic,
                slots=_to_slots(request.pokemon) if request.pokemon is not None else None,
            )
        except TeamServiceError as exc:
            raise _team_error(exc)
        return team.to_payload()

    @app.delete("/api/teams/{team_id}", status_code=204)
    async def delete_team(
        team_id: str,
        user_id: str = Depends(current_user),
        ctx: PartyContext = Depends(get_context),
    ) -> None:
        try:
            ctx.teams.delete(team_id, user_id)
        except TeamServiceError as exc:
            raise _team_error(exc)

    return app


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Entry point for running the web server."""
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port
    print(f"[poke-party-web] Starting web server at http://{host}:{port}")
    print("[poke-party-web] Press Ctrl+C to stop.")
    uvicorn.run(create_app(create_context(settings)), host=host, port=port)


if __name__ == "__main__":
    run()
