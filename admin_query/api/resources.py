from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Mapping, Sequence

from admin_query.core.config import settings
from admin_query.data import seed
from admin_query.schemas.universal import QueryDescriptor, QueryResult
from admin_query.services.record_query import run_query
from admin_query.services.resources import CUSTOMERS, INVOICES, ORDERS, PRODUCTS, ResourceDefinition

_LOG = logging.getLogger("admin_query.api")


class ResourceApi:
    """In-process stand-in for a list endpoint of one resource.

    Every call works on a deep copy of the backing records, so callers may
    mutate what they receive.
    """

    def __init__(
        self,
        resource: ResourceDefinition,
        records: Sequence[Mapping[str, Any]],
        throttle_ms: int | None = None,
    ):
        self.resource = resource
        self._records = records
        self.throttle_ms = throttle_ms

    async def _throttle(self) -> None:
        delay_ms = settings.API_THROTTLE_MS if self.throttle_ms is None else self.throttle_ms
        if delay_ms and delay_ms > 0:
            await asyncio.sleep(delay_ms / 1000)

    async def query(self, descriptor: QueryDescriptor | Mapping[str, Any] | None = None) -> QueryResult:
        await self._throttle()
        data = copy.deepcopy(list(self._records))
        result = run_query(data, descriptor, self.resource)
        _LOG.debug("Listed resource=%s count=%s", self.resource.name, result.count)
        return result

    async def get(self, record_id: str) -> dict[str, Any] | None:
        await self._throttle()
        for record in self._records:
            if record.get("id") == record_id:
                return copy.deepcopy(dict(record))
        return None


def customers_api(throttle_ms: int | None = None) -> ResourceApi:
    return ResourceApi(CUSTOMERS, seed.CUSTOMERS, throttle_ms)


def orders_api(throttle_ms: int | None = None) -> ResourceApi:
    return ResourceApi(ORDERS, seed.ORDERS, throttle_ms)


def invoices_api(throttle_ms: int | None = None) -> ResourceApi:
    return ResourceApi(INVOICES, seed.INVOICES, throttle_ms)


def products_api(throttle_ms: int | None = None) -> ResourceApi:
    return ResourceApi(PRODUCTS, seed.PRODUCTS, throttle_ms)
