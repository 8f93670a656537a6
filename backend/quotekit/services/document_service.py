"""Get/put access to named settings documents."""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from quotekit.models import SettingsDocument


async def get_document(session: AsyncSession, key: str) -> dict[str, Any] | None:
    document = await session.get(SettingsDocument, key)
    if document is None:
        return None
    return dict(document.data or {})


async def put_document(
    session: AsyncSession, key: str, data: dict[str, Any]
) -> dict[str, Any]:
    document = await session.get(SettingsDocument, key)
    if document is None:
        document = SettingsDocument(key=key, data=data)
        session.add(document)
    else:
        # Reassign so the JSON column is flagged dirty.
        document.data = dict(data)
    await session.commit()
    return dict(data)


async def delete_document(session: AsyncSession, key: str) -> bool:
    document = await session.get(SettingsDocument, key)
    if document is None:
        return False
    await session.delete(document)
    await session.commit()
    return True
