"""
Reconciliation and export service.

CRITICAL: Header total columns are a cache. Every amount leaving this
service is recomputed from the line items (stored header totals are only
used for item-less headers).
"""
from dataclasses import dataclass, field
import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CreditNoteExportRecord,
    OrderExportRecord,
    StatisticsDTO,
    YearExportDTO,
)
from core.data.uow import create_uow
from core.domain.entities import CreditNote, CreditNoteItem, Order, OrderItem
from core.domain.exceptions import IntegrityError, NotFoundError, ValidationError
from core.domain.value_objects import RevenueFilter, Totals, net_amount
from core.infrastructure.logging import get_logger
from core.settings import AppSettings, get_app_settings

logger = get_logger(__name__)


# =============================================================================
# RESULT OBJECTS
# =============================================================================

@dataclass
class ReconciledOrder:
    """Order with totals recomputed from its items."""

    order: Order
    total_ht: Decimal
    total_ttc: Decimal
    items: List[OrderItem] = field(default_factory=list)

    @property
    def totals(self) -> Totals:
        return Totals(total_ht=self.total_ht, total_ttc=self.total_ttc)


@dataclass
class ReconciledCreditNote:
    """Credit note with totals recomputed from its items."""

    credit_note: CreditNote
    total_ht: Decimal
    total_ttc: Decimal
    items: List[CreditNoteItem] = field(default_factory=list)

    @property
    def totals(self) -> Totals:
        return Totals(total_ht=self.total_ht, total_ttc=self.total_ttc)


# =============================================================================
# SERVICE
# =============================================================================

class ReconciliationService:
    """
    Read side: reconciled totals, net revenue statistics, year export.

    Every call reads through its own unit of work and never commits.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Args:
            session_factory: SQLAlchemy async session factory
            settings: Service settings (export_min_year)
        """
        self._session_factory = session_factory
        self._settings = settings or get_app_settings()

    async def get_order_with_reconciled_totals(self, order_id: int) -> ReconciledOrder:
        """
        Load an order with items and addresses and recompute its totals.

        Raises:
            NotFoundError: If the order does not exist
        """
        async with create_uow(self._session_factory) as uow:
            order = await uow.orders.get_by_id(order_id)

        if order is None:
            raise NotFoundError("order not found")

        totals = order.reconciled_totals()
        return ReconciledOrder(
            order=order,
            items=order.items,
            total_ht=totals.total_ht,
            total_ttc=totals.total_ttc,
        )

    async def get_credit_note_with_reconciled_totals(
        self, credit_note_id: int
    ) -> ReconciledCreditNote:
        """
        Load a credit note with items and recompute its totals.

        Raises:
            NotFoundError: If the credit note does not exist
        """
        async with create_uow(self._session_factory) as uow:
            credit_note = await uow.credit_notes.get_by_id(credit_note_id)

        if credit_note is None:
            raise NotFoundError("credit note not found")

        totals = credit_note.reconciled_totals()
        return ReconciledCreditNote(
            credit_note=credit_note,
            items=credit_note.items,
            total_ht=totals.total_ht,
            total_ttc=totals.total_ttc,
        )

    async def get_order_statistics(self, criteria: Optional[RevenueFilter] = None) -> StatisticsDTO:
        """
        Net revenue under a filter.

        Orders minus credit notes, each total reconciled from items; HT and
        TTC are floored at zero independently.

        Args:
            criteria: customer_id / start_date / end_date / year (all optional)

        Returns:
            StatisticsDTO with 2-decimal amounts
        """
        criteria = criteria or RevenueFilter()

        async with create_uow(self._session_factory) as uow:
            orders = await uow.orders.list_for_statistics(criteria)
            credit_notes = await uow.credit_notes.list_for_statistics(criteria)

        gross = sum((order.reconciled_totals() for order in orders), Totals.zero())
        refunded = sum((note.reconciled_totals() for note in credit_notes), Totals.zero())

        logger.info(
            f"Statistics over {len(orders)} orders and {len(credit_notes)} credit notes: "
            f"gross TTC {gross.total_ttc}, refunded TTC {refunded.total_ttc}"
        )

        return StatisticsDTO(
            total_amount_ht=net_amount(gross.total_ht, refunded.total_ht),
            total_amount_ttc=net_amount(gross.total_ttc, refunded.total_ttc),
        )

    async def get_year_export_data(self, year: int) -> Dict[str, List[Dict[str, Any]]]:
        """
        Everything booked in a calendar year, denormalized for exporters.

        The payload goes through a JSON serialize/parse round trip so the
        caller receives plain JSON-compatible data (camelCase keys, amounts
        as numbers).

        Args:
            year: Calendar year, at least AppSettings.export_min_year

        Returns:
            {"orders": [...], "creditNotes": [...]}

        Raises:
            ValidationError: If year is before the export cut-over
            IntegrityError: If records were lost in serialization
        """
        min_year = self._settings.export_min_year
        if year < min_year:
            raise ValidationError(f"export year must be >= {min_year}")

        async with create_uow(self._session_factory) as uow:
            orders = await uow.orders.list_by_year(year)
            credit_notes = await uow.credit_notes.list_by_year(year)

        logger.info(
            f"📊 Export {year}: {len(orders)} orders, {len(credit_notes)} credit notes"
        )

        export = YearExportDTO(
            orders=[
                OrderExportRecord.from_entity(order, order.reconciled_totals())
                for order in orders
            ],
            credit_notes=[
                CreditNoteExportRecord.from_entity(note, note.reconciled_totals())
                for note in credit_notes
            ],
        )

        payload = self._serialize(export)

        for key, expected in (("orders", len(orders)), ("creditNotes", len(credit_notes))):
            actual = len(payload.get(key, []))
            if actual != expected:
                logger.error(f"❌ Export {year} lost {key}: {expected} -> {actual}")
                raise IntegrityError(
                    f"export {year}: {key} count changed during serialization "
                    f"({expected} -> {actual})"
                )

        logger.info(f"✅ Export {year} serialized ({len(json.dumps(payload))} bytes)")
        return payload

    @staticmethod
    def _serialize(export: YearExportDTO) -> Dict[str, Any]:
        """Deep copy through JSON."""
        return json.loads(export.model_dump_json(by_alias=True))
