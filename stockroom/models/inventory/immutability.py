"""
ORM-level guard for the stock ledger.

StockTransaction rows are the audit trail that balances are derived from.
Any UPDATE or DELETE flushed through the ORM is rejected before SQL is sent.
Bulk ``update()``/``delete()`` statements bypass mapper events and are not
covered here.
"""

from sqlalchemy import event

from stockroom.core.exceptions import LedgerImmutableError
from stockroom.models.inventory.stock_transaction_models import StockTransaction
from stockroom.utils.logger import get_logger

logger = get_logger("db.immutability")


def _block_update(mapper, connection, target):
    logger.error(
        "Ledger update blocked",
        extra={"transaction_id": target.id},
    )
    raise LedgerImmutableError(target.id, "UPDATE")


def _block_delete(mapper, connection, target):
    logger.error(
        "Ledger delete blocked",
        extra={"transaction_id": target.id},
    )
    raise LedgerImmutableError(target.id, "DELETE")


def register_immutability_listeners():
    if not event.contains(StockTransaction, "before_update", _block_update):
        event.listen(StockTransaction, "before_update", _block_update)
    if not event.contains(StockTransaction, "before_delete", _block_delete):
        event.listen(StockTransaction, "before_delete", _block_delete)


def unregister_immutability_listeners():
    if event.contains(StockTransaction, "before_update", _block_update):
        event.remove(StockTransaction, "before_update", _block_update)
    if event.contains(StockTransaction, "before_delete", _block_delete):
        event.remove(StockTransaction, "before_delete", _block_delete)
