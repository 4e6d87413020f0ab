from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from shared.errors import NotFoundError, store_errors, transaction

from .models import Quotation, QuotationItem


class QuotationRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, customer_id: Optional[int] = None) -> list[Quotation]:
        query = select(Quotation).order_by(Quotation.quote_date.desc(), Quotation.quotation_id.desc())
        if customer_id is not None:
            query = query.where(Quotation.customer_id == customer_id)
        with store_errors("list quotations", "quotation"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_by_id(self, quotation_id: int, refresh: bool = False) -> Quotation:
        query = select(Quotation).where(Quotation.quotation_id == quotation_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        with store_errors("get quotation", "quotation"):
            result = await self.db.execute(query)
        quotation = result.scalars().first()
        if not quotation:
            raise NotFoundError("quotation")
        return quotation

    async def get_items(self, quotation_id: int) -> list[QuotationItem]:
        query = (
            select(QuotationItem)
            .where(QuotationItem.quotation_id == quotation_id)
            .order_by(QuotationItem.quotation_item_id)
        )
        with store_errors("get quotation items", "quotation item"):
            result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_full(self, quotation_id: int) -> tuple[Quotation, list[QuotationItem]]:
        quotation = await self.get_by_id(quotation_id)
        return quotation, await self.get_items(quotation_id)

    async def _insert_items(self, quotation_id: int, items: list[QuotationItem], operation: str) -> None:
        for item in items:
            item.quotation_id = quotation_id
            with store_errors(operation, "quotation item", parent="product"):
                self.db.add(item)
                await self.db.flush()

    async def create_with_items(
        self, quotation: Quotation, items: list[QuotationItem]
    ) -> tuple[Quotation, list[QuotationItem]]:
        async with transaction(self.db, "create quotation"):
            with store_errors("create quotation", "quotation", parent="customer"):
                self.db.add(quotation)
                await self.db.flush()
            await self._insert_items(quotation.quotation_id, items, "create quotation")
        await self.db.refresh(quotation)
        return quotation, items

    async def update_with_items(
        self,
        quotation_id: int,
        fields: dict,
        items: Optional[list[QuotationItem]] = None,
    ) -> tuple[Quotation, list[QuotationItem]]:
        """Replace the header and, when `items` is given, the whole item set."""
        async with transaction(self.db, "update quotation"):
            quotation = await self.get_by_id(quotation_id)
            for key, value in fields.items():
                setattr(quotation, key, value)
            with store_errors("update quotation", "quotation", parent="customer"):
                await self.db.flush()
            if items is not None:
                with store_errors("update quotation", "quotation item"):
                    await self.db.execute(delete(QuotationItem).where(QuotationItem.quotation_id == quotation_id))
                await self._insert_items(quotation_id, items, "update quotation")
        await self.db.refresh(quotation)
        return quotation, await self.get_items(quotation_id)

    async def update_status(self, quotation_id: int, status: str) -> Quotation:
        statement = (
            update(Quotation)
            .where(Quotation.quotation_id == quotation_id)
            .values(status=status, updated_at=func.now())
        )
        async with transaction(self.db, "update quotation status"):
            with store_errors("update quotation status", "quotation"):
                result = await self.db.execute(statement)
            if result.rowcount == 0:
                raise NotFoundError("quotation")
        return await self.get_by_id(quotation_id, refresh=True)

    async def delete_with_items(self, quotation_id: int) -> None:
        async with transaction(self.db, "delete quotation"):
            with store_errors("delete quotation", "quotation"):
                await self.db.execute(delete(QuotationItem).where(QuotationItem.quotation_id == quotation_id))
                result = await self.db.execute(delete(Quotation).where(Quotation.quotation_id == quotation_id))
            if result.rowcount == 0:
                raise NotFoundError("quotation")
