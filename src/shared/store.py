"""Record stores for expenses, categories and budgets.

Every store exposes the same async contract::

    get_all() -> list of records
    get_by_id(id) -> record, or NotFoundError
    create(fields) -> record with a generated id
    update(id, partial) -> merged record, or NotFoundError
    delete(id) -> True, or NotFoundError

Records are plain dicts with snake_case keys. Stores hand out copies, so
callers never hold a reference into the underlying collection.
"""

import asyncio
import copy
import logging
import os
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from .dynamodb import DynamoDBClient
from .exceptions import NotFoundError

logger = logging.getLogger(__name__)

# Seconds each operation of the simulated backend takes
DEFAULT_DELAYS = {
    'get_all': 0.3,
    'get_by_id': 0.2,
    'create': 0.4,
    'update': 0.35,
    'delete': 0.25,
}

STORE_LABELS = {
    'expenses': 'Expense',
    'categories': 'Category',
    'budgets': 'Budget',
}

STORE_TABLE_VARIABLES = {
    'expenses': 'EXPENSES_TABLE',
    'categories': 'CATEGORIES_TABLE',
    'budgets': 'BUDGETS_TABLE',
}


class Latency:
    """Async boundary that every store operation waits on."""

    async def wait(self, operation: str) -> None:
        raise NotImplementedError


class NoLatency(Latency):
    """Zero-delay boundary for tests and real backends."""

    async def wait(self, operation: str) -> None:
        return None


class SimulatedLatency(Latency):
    """Fixed per-operation delay standing in for network I/O."""

    def __init__(
        self,
        delays: Optional[Dict[str, float]] = None,
        sleep: Callable[[float], Any] = asyncio.sleep
    ):
        self.delays = dict(DEFAULT_DELAYS)
        if delays:
            self.delays.update(delays)
        self._sleep = sleep

    async def wait(self, operation: str) -> None:
        await self._sleep(self.delays.get(operation, 0))


class TimestampIdGenerator:
    """Millisecond-clock identifiers, bumped so two records never share one."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        current = int(self._clock() * 1000)
        if current <= self._last:
            current = self._last + 1
        self._last = current
        return str(current)


class InMemoryRecordStore:
    """Store owning an in-process list of records."""

    def __init__(
        self,
        label: str,
        records: Optional[Iterable[Dict[str, Any]]] = None,
        latency: Optional[Latency] = None,
        id_factory: Optional[Callable[[], str]] = None,
        prepend: bool = False
    ):
        """
        Initialize the store.

        Args:
            label: Record name used in error messages (e.g. "Expense")
            records: Optional initial records
            latency: Async boundary awaited by each operation
            id_factory: Callable producing new identifiers
            prepend: Insert new records at the front instead of the end
        """
        self.label = label
        self._records = [copy.deepcopy(record) for record in records or []]
        self.latency = latency or NoLatency()
        self._next_id = id_factory or TimestampIdGenerator()
        self.prepend = prepend

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.get('id') == record_id:
                return index
        raise NotFoundError(f"{self.label} not found")

    async def get_all(self) -> List[Dict[str, Any]]:
        await self.latency.wait('get_all')
        return [copy.deepcopy(record) for record in self._records]

    async def get_by_id(self, record_id: str) -> Dict[str, Any]:
        await self.latency.wait('get_by_id')
        return copy.deepcopy(self._records[self._index_of(record_id)])

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        await self.latency.wait('create')
        record = {**copy.deepcopy(fields), 'id': self._next_id()}

        if self.prepend:
            self._records.insert(0, record)
        else:
            self._records.append(record)

        return copy.deepcopy(record)

    async def update(self, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        await self.latency.wait('update')
        index = self._index_of(record_id)

        changes = {k: copy.deepcopy(v) for k, v in partial.items() if k != 'id'}
        self._records[index] = {**self._records[index], **changes}

        return copy.deepcopy(self._records[index])

    async def delete(self, record_id: str) -> bool:
        await self.latency.wait('delete')
        del self._records[self._index_of(record_id)]
        return True


class DynamoDBRecordStore:
    """Store backed by a DynamoDB table keyed by ``id``.

    boto3 calls block, so each one runs in a worker thread.
    """

    def __init__(
        self,
        label: str,
        table_name: str,
        latency: Optional[Latency] = None,
        id_factory: Optional[Callable[[], str]] = None
    ):
        self.label = label
        self.table = DynamoDBClient(table_name)
        self.latency = latency or NoLatency()
        self._next_id = id_factory or TimestampIdGenerator()

    async def get_all(self) -> List[Dict[str, Any]]:
        await self.latency.wait('get_all')
        return await asyncio.to_thread(self.table.scan_all)

    async def get_by_id(self, record_id: str) -> Dict[str, Any]:
        await self.latency.wait('get_by_id')
        item = await asyncio.to_thread(self.table.get_item, {'id': record_id})

        if not item:
            raise NotFoundError(f"{self.label} not found")

        return item

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        await self.latency.wait('create')
        record = {**fields, 'id': self._next_id()}
        return await asyncio.to_thread(self.table.put_item, record)

    async def update(self, record_id: str, partial: Dict[str, Any]) -> Dict[str, Any]:
        # Verify record exists
        existing = await self.get_by_id(record_id)

        changes = {k: v for k, v in partial.items() if k != 'id'}
        if not changes:
            return existing

        await self.latency.wait('update')
        return await asyncio.to_thread(self.table.update_item, {'id': record_id}, changes)

    async def delete(self, record_id: str) -> bool:
        # Verify record exists
        await self.get_by_id(record_id)

        await self.latency.wait('delete')
        await asyncio.to_thread(self.table.delete_item, {'id': record_id})
        return True


_stores: Dict[str, Any] = {}


def build_store(name: str, records: Optional[Iterable[Dict[str, Any]]] = None):
    """
    Build the store for a collection from environment configuration.

    Args:
        name: Collection name ("expenses", "categories" or "budgets")
        records: Initial records for an in-memory store

    Returns:
        A record store

    Raises:
        ValueError: If the collection or backend is unknown
    """
    if name not in STORE_LABELS:
        raise ValueError(f"Unknown record collection: {name}")

    label = STORE_LABELS[name]
    backend = os.environ.get('STORE_BACKEND', 'memory').lower()

    if backend == 'dynamodb':
        table_name = os.environ.get(STORE_TABLE_VARIABLES[name])
        logger.info(f"Using DynamoDB table {table_name} for {name}")
        return DynamoDBRecordStore(label, table_name)

    if backend != 'memory':
        raise ValueError(f"Unknown store backend: {backend}")

    if os.environ.get('SIMULATED_LATENCY', 'true').lower() == 'true':
        latency = SimulatedLatency()
    else:
        latency = NoLatency()

    return InMemoryRecordStore(
        label,
        records=records,
        latency=latency,
        prepend=(name == 'expenses')
    )


def get_store(name: str, records: Optional[Iterable[Dict[str, Any]]] = None):
    """Return the process-wide store for a collection, building it on first use."""
    if name not in _stores:
        _stores[name] = build_store(name, records)
    return _stores[name]


def reset_stores() -> None:
    """Forget every process-wide store."""
    _stores.clear()
