"""lg_league REST endpoints, one router per entity type.

GET    /{route}              : filtered, sorted, paginated listing (cached)
GET    /{route}/{id}         : single entity (cached)
POST   /{route}              : create, purges the type's cache families
PATCH  /{route}/{id}         : partial update, purges
DELETE /{route}/{id}         : delete, purges
GET    /players/team/{id}    : a team's squad, same cache entry as /players?team={id}

Query parameters that are neither registered filters nor paging/sort
controls (cache busters such as ``?_=123``) are dropped before keying.
"""

from collections.abc import Callable
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.lg_cache.application.runtime import CacheRuntime
from src.lg_common.database import get_db_session
from src.lg_common.enums import EntityType
from src.lg_common.errors import InvalidQueryError
from src.lg_common.response import ApiResponse, success_response
from src.lg_league.application.schemas import DEFAULT_LIMIT, ListQuery
from src.lg_league.application.service import LeagueService
from src.lg_league.domain.registry import ENTITY_SPECS, EntitySpec
from src.lg_league.domain.repository import DocumentRepositoryProtocol


def get_cache_runtime(request: Request) -> CacheRuntime:
    return request.app.state.cache_runtime


def get_document_repository(request: Request) -> DocumentRepositoryProtocol:
    return request.app.state.document_repository


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def build_list_query(params: dict[str, str], spec: EntitySpec) -> ListQuery:
    filters = {
        k: spec.normalizers[k](v) if k in spec.normalizers else v
        for k, v in params.items()
        if spec.filter(k) is not None
    }
    try:
        return ListQuery(
            filters=filters,
            sort_by=params.get("sortBy"),
            sort_order=params.get("sortOrder"),
            limit=params.get("limit", DEFAULT_LIMIT),
            offset=params.get("offset", 0),
        )
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise InvalidQueryError(fields) from exc


def _list_query_dependency(spec: EntitySpec) -> Callable[[Request], ListQuery]:
    def parse_list_query(request: Request) -> ListQuery:
        return build_list_query(dict(request.query_params.items()), spec)

    return parse_list_query


def _request_id(request: Request, resp: ApiResponse) -> ApiResponse:
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


def build_entity_router(spec: EntitySpec) -> APIRouter:
    router = APIRouter(prefix=f"/{spec.route}", tags=[spec.route])

    def get_service(
        runtime: Annotated[CacheRuntime, Depends(get_cache_runtime)],
        repo: Annotated[DocumentRepositoryProtocol, Depends(get_document_repository)],
        sessions: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
    ) -> LeagueService:
        return LeagueService(spec, runtime, repo, sessions=sessions)

    Service = Annotated[LeagueService, Depends(get_service)]
    Db = Annotated[AsyncSession, Depends(get_db_session)]
    Query = Annotated[ListQuery, Depends(_list_query_dependency(spec))]

    @router.get("")
    async def list_entities(request: Request, service: Service, query: Query) -> ApiResponse:
        data = await service.list_entities(query)
        return _request_id(request, success_response(data))

    if spec.entity_type is EntityType.PLAYER:

        @router.get("/team/{team_id}")
        async def list_team_players(
            team_id: str, request: Request, service: Service, query: Query
        ) -> ApiResponse:
            squad = query.model_copy(update={"filters": {**query.filters, "team": team_id}})
            data = await service.list_entities(squad)
            return _request_id(request, success_response(data))

    @router.get("/{entity_id}")
    async def get_entity(entity_id: str, request: Request, service: Service) -> ApiResponse:
        data = await service.get_entity(entity_id)
        return _request_id(request, success_response(data))

    @router.post("", status_code=201)
    async def create_entity(
        request: Request,
        service: Service,
        db: Db,
        fields: Annotated[dict[str, Any], Body()],
    ) -> ApiResponse:
        data = await service.create_entity(db, fields)
        return _request_id(request, success_response(data))

    @router.patch("/{entity_id}")
    async def update_entity(
        entity_id: str,
        request: Request,
        service: Service,
        db: Db,
        fields: Annotated[dict[str, Any], Body()],
    ) -> ApiResponse:
        data = await service.update_entity(db, entity_id, fields)
        return _request_id(request, success_response(data))

    @router.delete("/{entity_id}")
    async def delete_entity(
        entity_id: str, request: Request, service: Service, db: Db
    ) -> ApiResponse:
        await service.delete_entity(db, entity_id)
        return _request_id(request, success_response({"id": entity_id.lower()}))

    return router


routers = [build_entity_router(spec) for spec in ENTITY_SPECS.values()]
