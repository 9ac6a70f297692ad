"""Circle endpoints."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import APIRouter, Response, status

from rogha.api.v1.dependencies import CurrentUserDep, SessionDep
from rogha.models import Circle, CircleMembership
from rogha.schemas.circle import CircleCreate, CircleMemberAdd, CircleMemberResponse, CircleResponse
from rogha.services import circles as circle_service

router = APIRouter(prefix="/circles", tags=["circles"])


@router.get("/", response_model=list[CircleResponse])
async def list_circles(current_user: CurrentUserDep, db: SessionDep) -> Sequence[Circle]:
    """List circles the caller has joined."""
    return circle_service.list_circles_for_user(db, current_user.id)


@router.post("/", response_model=CircleResponse, status_code=status.HTTP_201_CREATED)
async def create_circle(
    circle_data: CircleCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Circle:
    return circle_service.create_circle(
        db,
        current_user.id,
        circle_data.name,
        circle_data.description,
    )


@router.get("/{circle_id}", response_model=CircleResponse)
async def get_circle(circle_id: str, current_user: CurrentUserDep, db: SessionDep) -> Circle:
    """Get a circle the caller belongs to, with its members."""
    return circle_service.get_circle_for_member(db, circle_id, current_user.id)


@router.post("/{circle_id}/members", response_model=CircleMemberResponse)
async def add_member(
    circle_id: str,
    member_data: CircleMemberAdd,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CircleMembership:
    """Add one of the caller's friends to a circle the caller belongs to."""
    return circle_service.add_member(db, circle_id, current_user.id, member_data.user_id)


@router.delete("/{circle_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    circle_id: str,
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    circle_service.remove_member(db, circle_id, current_user.id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{circle_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
async def leave_circle(circle_id: str, current_user: CurrentUserDep, db: SessionDep) -> Response:
    """Leave a circle; the caller stops seeing its posts immediately."""
    circle_service.leave_circle(db, circle_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
