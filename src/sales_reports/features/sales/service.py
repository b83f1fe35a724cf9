"""
Sales Service Module

Reads sales out of a store for reporting, and loads sale documents into the
SQL store for the CLI.
"""

import logging
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError
from tortoise.transactions import in_transaction

from ...common.errors import SalesFetchError, SalesReportError
from ...core.config import SALES_COLLECTION
from .models import Sale
from .schemas import SaleCreateSchema, SaleRecord
from .store import SalesStore

logger = logging.getLogger(__name__)


async def fetch_sales(store: SalesStore, collection: str = SALES_COLLECTION) -> List[SaleRecord]:
    """
    Fetches every sale of `collection`, newest first, as SaleRecords.

    The store decides the order; records are validated but never re-sorted,
    dropped or merged. An empty collection gives an empty list.

    Raises:
        SalesFetchError: the store query failed.
        pydantic.ValidationError: a document holds a value that cannot be
            read as a date or an amount.
    """
    try:
        documents = await store.fetch_sales(collection)
    except SalesReportError:
        raise
    except Exception as e:
        raise SalesFetchError(f"Could not read '{collection}' from the {store.name} store: {e}") from e

    records = [SaleRecord.model_validate(document) for document in documents]
    logger.info("Fetched %d sales from '%s' (%s store)", len(records), collection, store.name)
    return records


def parse_sale_documents(documents: Iterable[Mapping[str, Any]]) -> List[SaleCreateSchema]:
    """Validates raw JSON sale documents, reporting the index of the first bad one."""
    parsed = []
    for index, document in enumerate(documents):
        try:
            parsed.append(SaleCreateSchema.model_validate(document))
        except ValidationError as e:
            raise ValueError(f"Sale #{index} is invalid: {e}") from e
    return parsed


async def load_sales(sales: Iterable[SaleCreateSchema], replace: bool = False) -> int:
    """Stores sales in the `sales` table in one transaction. Returns how many were added."""
    count = 0
    async with in_transaction() as conn:
        if replace:
            deleted = await Sale.all().using_db(conn).delete()
            logger.info("Removed %d existing sales before loading", deleted)
        for sale in sales:
            await Sale.create(
                timestamp=sale.timestamp,
                employee_email=sale.employee_email,
                subtotal=sale.subtotal,
                total=sale.total,
                using_db=conn,
            )
            count += 1
    logger.info("Loaded %d sales", count)
    return count


async def list_stored_sales(limit: int = 20) -> List[Sale]:
    return await Sale.all().order_by("-timestamp", "-id").limit(limit)
