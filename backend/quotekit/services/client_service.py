"""Client management service helpers."""
from __future__ import annotations

import logging
import uuid
from typing import Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quotekit.models import Client

logger = logging.getLogger(__name__)


async def list_clients(
    session: AsyncSession,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 100,
) -> Sequence[Client]:
    """Return clients ordered by name, optionally filtered by a search term."""
    stmt = select(Client).order_by(func.lower(Client.name))
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Client.name).like(pattern),
                func.lower(Client.email).like(pattern),
                func.lower(Client.company).like(pattern),
            )
        )
    result = await session.execute(stmt.offset(skip).limit(limit))
    return result.scalars().all()


async def get_client(session: AsyncSession, client_id: uuid.UUID) -> Client | None:
    return await session.get(Client, client_id)


async def find_client(
    session: AsyncSession, *, name: str, email: str = ""
) -> Client | None:
    """Match by e-mail when one is given, otherwise by case-insensitive name."""
    email = email.strip().lower()
    if email:
        result = await session.execute(
            select(Client).where(func.lower(Client.email) == email).limit(1)
        )
        client = result.scalars().first()
        if client is not None:
            return client
    result = await session.execute(
        select(Client)
        .where(func.lower(Client.name) == name.strip().lower())
        .order_by(Client.created_at)
        .limit(1)
    )
    return result.scalars().first()


async def create_client(
    session: AsyncSession,
    *,
    name: str,
    email: str = "",
    company: str = "",
    notes: str = "",
) -> Client:
    name = name.strip()
    if not name:
        raise ValueError("Client name is required")
    client = Client(
        name=name,
        email=email.strip().lower(),
        company=company.strip(),
        notes=notes,
    )
    session.add(client)
    await session.commit()
    await session.refresh(client)
    logger.info("Created client %s", client.id)
    return client


async def find_or_create_client(
    session: AsyncSession,
    *,
    name: str,
    email: str = "",
    company: str = "",
) -> Client:
    """Reuse a matching client, refreshing its company, or create a new one."""
    client = await find_client(session, name=name, email=email)
    if client is None:
        return await create_client(session, name=name, email=email, company=company)
    company = company.strip()
    if company and company != client.company:
        client.company = company
        await session.commit()
        await session.refresh(client)
    return client


async def update_client(
    session: AsyncSession,
    *,
    client: Client,
    name: str | None = None,
    email: str | None = None,
    company: str | None = None,
    notes: str | None = None,
) -> Client:
    if name is not None:
        if not name.strip():
            raise ValueError("Client name is required")
        client.name = name.strip()
    if email is not None:
        client.email = email.strip().lower()
    if company is not None:
        client.company = company.strip()
    if notes is not None:
        client.notes = notes
    await session.commit()
    await session.refresh(client)
    return client


async def delete_client(session: AsyncSession, client_id: uuid.UUID) -> bool:
    """Delete a client together with its quotes."""
    result = await session.execute(
        select(Client).options(selectinload(Client.quotes)).where(Client.id == client_id)
    )
    client = result.scalars().one_or_none()
    if client is None:
        return False
    await session.delete(client)
    await session.commit()
    logger.info("Deleted client %s and %d quote(s)", client_id, len(client.quotes))
    return True
