"""BaseService — foundation for all mktledger services.

Every service receives a :class:`Store` at construction time and owns its
transaction boundaries via ``self._store.transaction()``. Preconditions
are checked by raising :class:`LedgerError` inside the transaction; the
store rolls back and :meth:`BaseService._run` turns the error into a
failed :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mktledger.config.logging import bound_operation
from mktledger.domain.errors import ErrorCode, LedgerError
from mktledger.services.result import ServiceError, ServiceResult
from mktledger.services.telemetry import get_current_span

if TYPE_CHECKING:
    from collections.abc import Callable

    from mktledger.infrastructure.store import Store, StoreTransaction

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class MarketService(BaseService):
            def remove_resources(self, lister: str, quantity: int) -> ServiceResult:
                def apply(txn: StoreTransaction) -> dict[str, Any]:
                    ...
                return self._run("remove_resources", lister, apply)
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    def _run(
        self,
        op: str,
        caller: str,
        apply: Callable[[StoreTransaction], dict[str, Any]],
    ) -> ServiceResult:
        """Execute *apply* in one transaction and wrap the outcome.

        ``LedgerError`` becomes ``ok=False`` after rollback. Any other
        exception, including ``ArithmeticOverflowError``, propagates.
        """
        span = get_current_span()
        if span is not None:
            span.annotate("op", op)
            span.annotate("caller", caller)
        with bound_operation(op, caller):
            try:
                with self._store.transaction() as txn:
                    data = apply(txn)
            except LedgerError as exc:
                if span is not None:
                    span.annotate("error", exc.code.value)
                logger.info("%s rejected: %s %s", op, exc.code, exc.message)
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(
                        code=exc.code.value,
                        message=exc.message,
                        detail=exc.detail,
                    ),
                )
            logger.debug("%s committed", op)
            return ServiceResult(ok=True, op=op, data=data)

    def _require_admin(self, caller: str) -> None:
        """Raise ``ADMIN_ONLY`` unless *caller* is the configured administrator."""
        if caller != self._store.admin:
            raise LedgerError(
                ErrorCode.ADMIN_ONLY,
                f"Only the administrator may perform this operation (caller: {caller!r})",
                caller=caller,
            )
