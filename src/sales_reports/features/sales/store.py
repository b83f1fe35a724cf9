"""
Sales Store Module

A sales store hands back every sale document of a collection, newest first,
as plain mappings. Three backends exist:

- FirestoreSalesStore: the production document store, authenticated with a
  service account credential file.
- TortoiseSalesStore: the same documents kept in a SQL database through
  Tortoise ORM (local development, demos, the CLI loader).
- InMemorySalesStore: a list of documents, used by tests and by
  `sales-reports render --from-json`.

`init_sales_store` builds the configured backend and reports failure as a
value; the caller (CLI or app lifespan) decides whether that is fatal.
"""

import datetime
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import credentials, firestore
from pydantic import TypeAdapter, ValidationError
from tortoise import Tortoise

from ...common.errors import SalesFetchError, StoreInitError
from ...core.config import FIREBASE_CREDENTIALS, SALES_STORE_BACKEND, TORTOISE_ORM_CONFIG
from .models import Sale

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "sales-reports"


class SalesStore(Protocol):
    name: str

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def fetch_sales(self, collection: str) -> List[Mapping[str, Any]]: ...


# Same coercion SaleRecord applies, so the sort agrees with what the report shows
_TIMESTAMP = TypeAdapter(Optional[datetime.datetime])


def _timestamp_sort_key(document: Mapping[str, Any]):
    """Sort key putting the newest sale first and undated sales last."""
    value = document.get("timestamp")
    if isinstance(value, str) and not value.strip():
        value = None
    try:
        value = _TIMESTAMP.validate_python(value)
    except ValidationError:
        # SaleRecord rejects it later with a proper message
        value = None
    if value is None:
        return (1, 0.0)
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return (0, -value.timestamp())


class InMemorySalesStore:
    name = "memory"

    def __init__(self, documents: Iterable[Mapping[str, Any]] = ()):
        self._documents = [dict(d) for d in documents]

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def fetch_sales(self, collection: str) -> List[Mapping[str, Any]]:
        # sorted() is stable, so sales sharing a timestamp keep insertion order
        return sorted(self._documents, key=_timestamp_sort_key)


class TortoiseSalesStore:
    """Sales kept in the `sales` table. The collection name is informational only."""

    name = "tortoise"

    def __init__(self, config: Optional[Dict[str, Any]] = None, manage_connections: bool = True):
        self._config = config or TORTOISE_ORM_CONFIG
        self._manage_connections = manage_connections

    async def open(self) -> None:
        if self._manage_connections:
            await Tortoise.init(config=self._config)
            logger.info("Tortoise-ORM has been initialized for the sales store.")

    async def close(self) -> None:
        if self._manage_connections:
            await Tortoise.close_connections()
            logger.info("Tortoise-ORM connections have been closed.")

    async def fetch_sales(self, collection: str) -> List[Mapping[str, Any]]:
        # NULL ordering differs between SQLite and Postgres; query dated and undated sales separately
        dated = await Sale.filter(timestamp__isnull=False).order_by("-timestamp", "-id")
        undated = await Sale.filter(timestamp__isnull=True).order_by("-id")
        logger.debug("Fetched %d dated and %d undated sales for '%s'", len(dated), len(undated), collection)
        return [sale.to_document() for sale in [*dated, *undated]]


class FirestoreSalesStore:
    name = "firestore"

    def __init__(self, client):
        self._client = client

    @classmethod
    def from_credentials(cls, credentials_path: str) -> "FirestoreSalesStore":
        """
        Load the service account file and build a Firestore client.

        Raises:
            StoreInitError: if the file is missing or is not a valid service account.
        """
        path = Path(credentials_path)
        if not path.is_file():
            raise StoreInitError(
                f"Firestore credential file '{credentials_path}' was not found. "
                "Place the service account key there or set FIREBASE_CREDENTIALS."
            )
        try:
            cert = credentials.Certificate(str(path))
            try:
                app = firebase_admin.get_app(FIREBASE_APP_NAME)
            except ValueError:
                app = firebase_admin.initialize_app(cert, name=FIREBASE_APP_NAME)
            client = firestore.client(app=app)
        except (ValueError, OSError) as e:
            raise StoreInitError(f"Invalid Firestore credential file '{credentials_path}': {e}") from e
        return cls(client)

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def fetch_sales(self, collection: str) -> List[Mapping[str, Any]]:
        def _stream() -> List[Mapping[str, Any]]:
            query = self._client.collection(collection).order_by(
                "timestamp", direction=firestore.Query.DESCENDING
            )
            return [snapshot.to_dict() or {} for snapshot in query.stream()]

        try:
            # The Firestore client is synchronous
            return await run_in_threadpool(_stream)
        except Exception as e:
            raise SalesFetchError(f"Firestore query on '{collection}' failed: {e}") from e


@dataclass(frozen=True)
class StoreInitResult:
    store: Optional[SalesStore] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.store is not None


def init_sales_store(
    backend: str = SALES_STORE_BACKEND,
    credentials_path: str = FIREBASE_CREDENTIALS,
    tortoise_config: Optional[Dict[str, Any]] = None,
) -> StoreInitResult:
    """
    Build the configured sales store.

    Never exits the process: a missing credential or an unknown backend is
    returned as `StoreInitResult(error=...)` for the entry point to act on.
    """
    backend = (backend or "").strip().lower()
    try:
        if backend == "firestore":
            store = FirestoreSalesStore.from_credentials(credentials_path)
        elif backend == "tortoise":
            store = TortoiseSalesStore(config=tortoise_config)
        else:
            raise StoreInitError(
                f"Unknown sales store backend '{backend}'. Use 'firestore' or 'tortoise'."
            )
    except StoreInitError as e:
        logger.error("Sales store initialization failed: %s", e)
        return StoreInitResult(error=str(e))

    logger.info("Sales store '%s' initialized.", store.name)
    return StoreInitResult(store=store)
