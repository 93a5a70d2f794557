"""
REST API routes — endpoint listing and the protected user page.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, Iterator, List

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute
from pydantic import BaseModel, ConfigDict, Field

from auth.dependencies import get_current_user
from database.models import User

router = APIRouter()


class EndpointInfo(BaseModel):
    path: str
    methods: List[str]
    middlewares: List[str]


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    access_token: str = Field(serialization_alias="accessToken")


class UserPageResponse(BaseModel):
    message: str
    user: UserOut


def _middlewares(route: APIRoute) -> List[str]:
    names = [
        dep.call.__name__
        for dep in route.dependant.dependencies
        if dep.call is get_current_user
    ]
    return names or ["anonymous"]


def _api_routes(routes: Iterable[Any]) -> Iterator[APIRoute]:
    """
    Yield every ``APIRoute``, descending into included routers.

    Newer FastAPI releases keep each ``include_router`` call as a wrapper
    exposing ``routes`` or ``original_router`` instead of flattening it.
    """
    for route in routes:
        if isinstance(route, APIRoute):
            yield route
            continue
        nested = getattr(route, "routes", None)
        if nested is None:
            nested = getattr(getattr(route, "original_router", None), "routes", None)
        if nested:
            yield from _api_routes(nested)


@router.get("/", response_model=List[EndpointInfo])
async def list_endpoints(request: Request) -> List[Dict[str, Any]]:
    """List every API route with its methods."""
    return [
        {
            "path": route.path,
            "methods": sorted(route.methods),
            "middlewares": _middlewares(route),
        }
        for route in _api_routes(request.app.routes)
    ]


@router.get("/user-page", response_model=UserPageResponse)
async def user_page(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"message": "You are logged in!", "user": UserOut.model_validate(user)}
