"""Client management API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.api import deps
from quotekit.schemas.client import ClientCreate, ClientRead, ClientUpdate
from quotekit.schemas.quote import QuoteRead
from quotekit.services import client_service, quote_service

router = APIRouter()


async def _require_client(session: AsyncSession, client_id: uuid.UUID):
    client = await client_service.get_client(session, client_id)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Client not found"
        )
    return client


@router.get("", response_model=list[ClientRead], summary="List clients")
async def list_clients(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> list[ClientRead]:
    clients = await client_service.list_clients(
        session, search=search, skip=skip, limit=min(limit, 500)
    )
    return [ClientRead.model_validate(client) for client in clients]


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
)
async def create_client(
    payload: ClientCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    try:
        client = await client_service.create_client(
            session,
            name=payload.name,
            email=payload.email or "",
            company=payload.company,
            notes=payload.notes,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return ClientRead.model_validate(client)


@router.get("/{client_id}", response_model=ClientRead, summary="Get client")
async def get_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    return ClientRead.model_validate(await _require_client(session, client_id))


@router.get(
    "/{client_id}/quotes", response_model=list[QuoteRead], summary="Client quotes"
)
async def list_client_quotes(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[QuoteRead]:
    await _require_client(session, client_id)
    quotes = await quote_service.list_quotes(session, client_id=client_id)
    return [QuoteRead.model_validate(quote) for quote in quotes]


@router.patch("/{client_id}", response_model=ClientRead, summary="Update client")
async def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ClientRead:
    client = await _require_client(session, client_id)
    changes = payload.model_dump(exclude_unset=True)
    try:
        client = await client_service.update_client(session, client=client, **changes)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return ClientRead.model_validate(client)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete client and its quotes",
)
async def delete_client(
    client_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> Response:
    if not await client_service.delete_client(session, client_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Client not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
