"""
Integration tests for ReconciliationService.

Totals are always recomputed from line items; statistics net credit notes
off orders and never go below zero; exports are per calendar year.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from core.application.dtos import CreateCreditNoteRequest
from core.application.services import ReconciliationService
from core.data.uow import create_uow
from core.domain.entities import OrderItem
from core.domain.exceptions import IntegrityError, NotFoundError, ValidationError
from core.domain.value_objects import RevenueFilter


@pytest.fixture
def create_credit_note(order_service, credit_note_payload):
    async def _create(order_id, **overrides):
        request = CreateCreditNoteRequest.model_validate(credit_note_payload(order_id, **overrides))
        return await order_service.create_credit_note(request)

    return _create


class TestReconciledTotals:
    """Test per-aggregate reconciliation."""

    @pytest.mark.asyncio
    async def test_order_totals_follow_items_after_drift(
        self, order_service, reconciliation_service, cart_request, test_session_factory
    ):
        order = await order_service.create_order_from_cart(cart_request())
        async with create_uow(test_session_factory) as uow:
            await uow.order_items.create_item(
                order.id,
                OrderItem(
                    product_id=2,
                    product_name="Gadget",
                    quantity=1,
                    unit_price_ht="5.555",
                    unit_price_ttc="6.66",
                    vat_rate="20",
                    total_price_ht="5.55",
                    total_price_ttc="6.66",
                ),
            )
            await uow.commit()

        reconciled = await reconciliation_service.get_order_with_reconciled_totals(order.id)

        assert reconciled.total_ht == Decimal("25.55")
        assert reconciled.total_ttc == Decimal("30.86")
        assert len(reconciled.items) == 2
        assert reconciled.order.total_amount_ht == Decimal("20.00")

    @pytest.mark.asyncio
    async def test_line_total_is_trusted_over_quantity_times_price(
        self, order_service, reconciliation_service, cart_request, cart_line
    ):
        line = cart_line(quantity=3, unitPriceHT=10, unitPriceTTC=12, totalPriceHT=25, totalPriceTTC=30)
        order = await order_service.create_order_from_cart(
            cart_request(cart={"items": [line], "subtotal": 25, "total": 30})
        )

        reconciled = await reconciliation_service.get_order_with_reconciled_totals(order.id)

        assert reconciled.total_ht == Decimal("25.00")
        assert reconciled.total_ttc == Decimal("30.00")
        assert reconciled.items[0].quantity == 3

    @pytest.mark.asyncio
    async def test_missing_order(self, reconciliation_service):
        with pytest.raises(NotFoundError):
            await reconciliation_service.get_order_with_reconciled_totals(404)

    @pytest.mark.asyncio
    async def test_credit_note_items_override_header(
        self, order_service, reconciliation_service, cart_request, cart_line, create_credit_note
    ):
        order = await order_service.create_order_from_cart(cart_request())
        credit_note = await create_credit_note(
            order.id,
            items=[cart_line(quantity=1, unitPriceHT=15, unitPriceTTC=18, totalPriceHT=15, totalPriceTTC=18)],
        )

        reconciled = await reconciliation_service.get_credit_note_with_reconciled_totals(
            credit_note.id
        )

        assert reconciled.total_ht == Decimal("15.00")
        assert reconciled.total_ttc == Decimal("18.00")

    @pytest.mark.asyncio
    async def test_item_less_credit_note_uses_stored_totals(
        self, order_service, reconciliation_service, cart_request, create_credit_note
    ):
        order = await order_service.create_order_from_cart(cart_request())
        credit_note = await create_credit_note(order.id, totalAmountHT="4", totalAmountTTC="4.8")

        reconciled = await reconciliation_service.get_credit_note_with_reconciled_totals(
            credit_note.id
        )

        assert reconciled.totals.total_ttc == Decimal("4.80")

    @pytest.mark.asyncio
    async def test_missing_credit_note(self, reconciliation_service):
        with pytest.raises(NotFoundError, match="credit note not found"):
            await reconciliation_service.get_credit_note_with_reconciled_totals(404)


class TestStatistics:
    """Test net revenue."""

    @pytest.mark.asyncio
    async def test_orders_minus_credit_notes(
        self, order_service, reconciliation_service, cart_request, create_credit_note
    ):
        first = await order_service.create_order_from_cart(cart_request())
        await order_service.create_order_from_cart(cart_request())
        await create_credit_note(first.id, totalAmountHT="5", totalAmountTTC="6.05")

        stats = await reconciliation_service.get_order_statistics(RevenueFilter())

        assert stats.total_amount_ht == Decimal("35.00")
        assert stats.total_amount_ttc == Decimal("42.35")

    @pytest.mark.asyncio
    async def test_net_revenue_floored_at_zero(
        self, order_service, reconciliation_service, cart_request, create_credit_note
    ):
        order = await order_service.create_order_from_cart(cart_request())
        await create_credit_note(order.id, totalAmountHT="50", totalAmountTTC="60")

        stats = await reconciliation_service.get_order_statistics()

        assert stats.total_amount_ht == Decimal("0")
        assert stats.total_amount_ttc == Decimal("0")

    @pytest.mark.asyncio
    async def test_filters_apply_to_both_sides(
        self, order_service, reconciliation_service, cart_request, create_credit_note, backdate
    ):
        old = await order_service.create_order_from_cart(cart_request())
        recent = await order_service.create_order_from_cart(cart_request())
        refund = await create_credit_note(recent.id, totalAmountHT="10", totalAmountTTC="12.1")
        await backdate("order", old.id, datetime(2025, 5, 1))
        await backdate("order", recent.id, datetime(2026, 2, 1))
        await backdate("credit_note", refund.id, datetime(2026, 2, 2))

        stats_2025 = await reconciliation_service.get_order_statistics(RevenueFilter(year=2025))
        stats_2026 = await reconciliation_service.get_order_statistics(RevenueFilter(year=2026))
        other_customer = await reconciliation_service.get_order_statistics(
            RevenueFilter(customer_id=999)
        )

        assert stats_2025.total_amount_ttc == Decimal("24.20")
        assert stats_2026.total_amount_ht == Decimal("10.00")
        assert stats_2026.total_amount_ttc == Decimal("12.10")
        assert other_customer.total_amount_ttc == Decimal("0")


class TestYearExport:
    """Test year-end export."""

    @pytest.mark.asyncio
    async def test_only_orders_of_the_year_are_exported(
        self, order_service, reconciliation_service, cart_request, backdate
    ):
        march = await order_service.create_order_from_cart(
            cart_request(addressData={"shipping": {"city": "Paris"}})
        )
        new_year_eve = await order_service.create_order_from_cart(cart_request())
        await backdate("order", march.id, datetime(2025, 3, 1))
        await backdate("order", new_year_eve.id, datetime(2024, 12, 31))

        export = await reconciliation_service.get_year_export_data(2025)

        assert [record["id"] for record in export["orders"]] == [march.id]
        record = export["orders"][0]
        assert record["totalAmountHT"] == 20.0
        assert record["totalAmountTTC"] == 24.2
        assert record["items"][0]["productName"] == "Widget"
        assert record["addresses"][0]["addressType"] == "shipping"
        assert record["createdAt"].startswith("2025-03-01")
        assert export["creditNotes"] == []

    @pytest.mark.asyncio
    async def test_credit_notes_carry_reconciled_totals(
        self, order_service, reconciliation_service, cart_request, cart_line, create_credit_note, backdate
    ):
        order = await order_service.create_order_from_cart(cart_request())
        credit_note = await create_credit_note(
            order.id,
            items=[cart_line(quantity=1, unitPriceHT=15, unitPriceTTC=18, totalPriceHT=15, totalPriceTTC=18)],
        )
        await backdate("order", order.id, datetime(2025, 7, 1))
        await backdate("credit_note", credit_note.id, datetime(2025, 7, 2))

        export = await reconciliation_service.get_year_export_data(2025)

        [record] = export["creditNotes"]
        assert record["orderId"] == order.id
        assert record["status"] == "pending"
        assert record["totalAmountTTC"] == 18.0
        assert len(record["items"]) == 1

    @pytest.mark.asyncio
    async def test_year_before_cutover_rejected(self, reconciliation_service):
        with pytest.raises(ValidationError, match="2025"):
            await reconciliation_service.get_year_export_data(2024)

    @pytest.mark.asyncio
    async def test_lost_records_raise_integrity_error(
        self, order_service, reconciliation_service, cart_request, backdate, monkeypatch
    ):
        order = await order_service.create_order_from_cart(cart_request())
        await backdate("order", order.id, datetime(2025, 3, 1))

        monkeypatch.setattr(
            ReconciliationService,
            "_serialize",
            staticmethod(lambda export: {"orders": [], "creditNotes": []}),
        )

        with pytest.raises(IntegrityError, match="orders"):
            await reconciliation_service.get_year_export_data(2025)
