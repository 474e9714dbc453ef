from typing import Any, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from solar_monitor.models import CachedResponse
from solar_monitor.utils.logger import get_logger

logger = get_logger("db")


class CRUDCachedResponse:
    def __init__(self, model=CachedResponse):
        self.model = model

    async def get_by_key(self, db: AsyncSession, *, key: str) -> Optional[CachedResponse]:
        result = await db.execute(select(self.model).filter(self.model.key == key))
        return result.scalars().first()

    async def get_multi(self, db: AsyncSession) -> List[CachedResponse]:
        result = await db.execute(select(self.model).order_by(self.model.key))
        return list(result.scalars().all())

    async def upsert(
        self, db: AsyncSession, *, key: str, payload: Any, fetched_at: float
    ) -> CachedResponse:
        """Store the payload under key, replacing whatever was there"""
        db_obj = await self.get_by_key(db, key=key)
        if db_obj:
            db_obj.payload = payload
            db_obj.fetched_at = fetched_at
        else:
            db_obj = self.model(key=key, payload=payload, fetched_at=fetched_at)
            db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.debug(f"Cached response stored for key {key}")
        return db_obj

    async def remove(self, db: AsyncSession, *, key: str) -> bool:
        result = await db.execute(delete(self.model).where(self.model.key == key))
        await db.commit()
        return result.rowcount > 0

    async def remove_all(self, db: AsyncSession) -> int:
        result = await db.execute(delete(self.model))
        await db.commit()
        return result.rowcount or 0


cached_response = CRUDCachedResponse(CachedResponse)
