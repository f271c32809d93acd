"""Reservation API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roomflow.api import deps
from roomflow.api.errors import to_http_exception
from roomflow.schemas.reservation import ReservationRead, ReservationUpdate
from roomflow.services import reservation_service

router = APIRouter(prefix="/reservations")


@router.get("/{reservation_id}", response_model=ReservationRead)
async def get_reservation(
    reservation_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    reservation = await reservation_service.get_reservation(
        session, reservation_id=reservation_id
    )
    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Reservation not found", "code": "not_found"},
        )
    return ReservationRead.model_validate(reservation)


@router.patch(
    "/{reservation_id}",
    response_model=ReservationRead,
    summary="Update a reservation",
)
async def update_reservation(
    reservation_id: int,
    payload: ReservationUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    actor: Annotated[str, Depends(deps.get_actor)],
) -> ReservationRead:
    changes = payload.model_dump(exclude_unset=True)
    try:
        updated = await reservation_service.update_reservation(
            session, reservation_id=reservation_id, changes=changes, actor=actor
        )
    except IntegrityError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Referenced record does not exist", "code": "integrity"},
        ) from exc
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(updated)


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a reservation",
)
async def delete_reservation(
    reservation_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    actor: Annotated[str, Depends(deps.get_actor)],
) -> Response:
    try:
        await reservation_service.delete_reservation(
            session, reservation_id=reservation_id, actor=actor
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
