"""BaseService: shared foundation for ledger services.

Every service receives a :class:`LedgerStore` at construction time and
owns its read/modify/write boundary via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cashflow.domain.ids import IdLookupError
from cashflow.services.result import ServiceResult

if TYPE_CHECKING:
    from cashflow.infrastructure.storage import LedgerStore, StorageError

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all ledger services.

    Usage::

        class RecurringService(BaseService):
            def add(self, ...) -> ServiceResult:
                with self._store.transaction() as txn:
                    txn.stage(txn.ledger.model_copy(update={...}))
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def _storage_failure(self, op: str, exc: StorageError) -> ServiceResult:
        logger.debug("Storage failure during %s: %s", op, exc)
        return ServiceResult.failure(op, "STORAGE_ERROR", str(exc), {"path": str(self._store.path)})

    @staticmethod
    def _lookup_failure(op: str, exc: IdLookupError) -> ServiceResult:
        return ServiceResult.failure(op, exc.code, exc.message)
