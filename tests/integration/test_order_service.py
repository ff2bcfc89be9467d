"""
Integration tests for OrderApplicationService.

Covers atomic order creation from a cart, payment reference idempotency
and credit note creation.
"""
from decimal import Decimal

import pytest

from core.application.dtos import CreateCreditNoteRequest
from core.data.uow import create_uow
from core.domain.enums import AddressType, CreationStage, CreditNoteStatus
from core.domain.exceptions import (
    CreditNoteCreationFailed,
    NotFoundError,
    OrderCreationFailed,
    ValidationError,
)
from core.domain.value_objects import RevenueFilter


async def count_rows(session_factory, order_id=None):
    async with create_uow(session_factory) as uow:
        orders = await uow.orders.list_for_statistics(RevenueFilter())
        items = await uow.order_items.get_by_parent_id(order_id) if order_id else []
        return len(orders), len(items)


class TestCreateOrderFromCart:
    """Test the atomic cart -> order pipeline."""

    @pytest.mark.asyncio
    async def test_creates_header_items_and_shipping(self, order_service, cart_request):
        request = cart_request(addressData={"shipping": {"city": "Paris", "zip": "75001"}})

        order = await order_service.create_order_from_cart(request)

        assert order.id is not None
        assert order.total_amount_ht == Decimal("20.00")
        assert order.total_amount_ttc == Decimal("24.20")
        assert order.customer_snapshot["email"] == "a@b.com"
        assert len(order.items) == 1
        assert order.items[0].product_name == "Widget"
        assert [a.address_type for a in order.addresses] == [AddressType.SHIPPING]

    @pytest.mark.asyncio
    async def test_without_address_data_writes_no_address(self, order_service, cart_request):
        order = await order_service.create_order_from_cart(cart_request())

        assert order.addresses == []

    @pytest.mark.asyncio
    async def test_distinct_billing_address_is_written(self, order_service, cart_request):
        request = cart_request(
            addressData={
                "shipping": {"city": "Paris"},
                "billing": {"city": "Lyon"},
                "useSameBillingAddress": False,
            }
        )

        order = await order_service.create_order_from_cart(request)

        assert order.address(AddressType.BILLING).address_snapshot == {"city": "Lyon"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "address_data",
        [
            {"shipping": {"city": "Paris"}, "billing": {"city": "Lyon"}, "useSameBillingAddress": True},
            {"shipping": {"city": "Paris"}, "billing": {"city": "Paris"}, "useSameBillingAddress": False},
        ],
    )
    async def test_billing_skipped_when_same_as_shipping(
        self, order_service, cart_request, address_data
    ):
        order = await order_service.create_order_from_cart(cart_request(addressData=address_data))

        assert [a.address_type for a in order.addresses] == [AddressType.SHIPPING]

    @pytest.mark.asyncio
    async def test_empty_cart_rejected_before_any_write(
        self, order_service, cart_request, test_session_factory
    ):
        with pytest.raises(ValidationError, match="cart is empty"):
            await order_service.create_order_from_cart(cart_request(items=[]))

        assert await count_rows(test_session_factory) == (0, 0)

    @pytest.mark.asyncio
    async def test_customer_identity_required(self, order_service, cart_request):
        with pytest.raises(ValidationError, match="customer identity required"):
            await order_service.create_order_from_cart(
                cart_request(customerData={"firstName": "No email"})
            )

    @pytest.mark.asyncio
    async def test_customer_id_alone_is_enough(self, order_service, cart_request):
        order = await order_service.create_order_from_cart(
            cart_request(customerData=None, customerId=42)
        )

        assert order.customer_id == 42
        assert order.customer_snapshot is None

    @pytest.mark.asyncio
    async def test_header_validated_before_any_write(self, order_service, cart_payload):
        from core.application.dtos import CreateOrderFromCartRequest

        payload = cart_payload()
        payload["cart"]["total"] = 10  # TTC below HT

        with pytest.raises(ValidationError, match="total amount TTC"):
            await order_service.create_order_from_cart(
                CreateOrderFromCartRequest.model_validate(payload)
            )

    @pytest.mark.asyncio
    async def test_invalid_item_rolls_back_everything(
        self, order_service, cart_request, cart_line, test_session_factory
    ):
        request = cart_request(
            items=[cart_line(), cart_line(productName="   ")],
            addressData={"shipping": {"city": "Paris"}},
        )

        with pytest.raises(OrderCreationFailed) as exc_info:
            await order_service.create_order_from_cart(request)

        assert isinstance(exc_info.value.cause, ValidationError)
        assert "product name required" in str(exc_info.value)
        assert exc_info.value.stage == CreationStage.HEADER_WRITTEN.value
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert await count_rows(test_session_factory) == (0, 0)

    @pytest.mark.asyncio
    async def test_address_failure_rolls_back_items(
        self, order_service, cart_request, test_session_factory, monkeypatch
    ):
        from core.data.repositories import SqlAlchemyOrderAddressRepository

        async def fail(self, order_id, address_type, snapshot):
            raise RuntimeError("disk full")

        monkeypatch.setattr(SqlAlchemyOrderAddressRepository, "create", fail)

        with pytest.raises(OrderCreationFailed, match="disk full"):
            await order_service.create_order_from_cart(
                cart_request(addressData={"shipping": {"city": "Paris"}})
            )

        assert await count_rows(test_session_factory) == (0, 0)


class TestIdempotency:
    """Test payment reference replays."""

    @pytest.mark.asyncio
    async def test_replay_returns_same_order_without_new_children(
        self, order_service, cart_request, cart_line, test_session_factory
    ):
        first = await order_service.create_order_from_cart(
            cart_request(paymentReference="pi_abc", addressData={"shipping": {"city": "Paris"}})
        )

        replay = await order_service.create_order_from_cart(
            cart_request(
                items=[cart_line(), cart_line(productName="Extra")],
                paymentReference="pi_abc",
                addressData={"shipping": {"city": "Paris"}},
            )
        )

        assert replay.id == first.id
        assert len(replay.items) == 1
        assert len(replay.addresses) == 1
        assert await count_rows(test_session_factory, first.id) == (1, 1)

    @pytest.mark.asyncio
    async def test_blank_payment_reference_is_not_a_key(self, order_service, cart_request):
        first = await order_service.create_order_from_cart(cart_request(paymentReference=" "))
        second = await order_service.create_order_from_cart(cart_request(paymentReference=""))

        assert first.id != second.id
        assert first.payment_reference is None


class TestOrderCommands:
    @pytest.mark.asyncio
    async def test_update_delivery_status(self, order_service, cart_request):
        order = await order_service.create_order_from_cart(cart_request())

        updated = await order_service.update_delivery_status(order.id, True)

        assert updated.delivered is True

    @pytest.mark.asyncio
    async def test_update_delivery_status_unknown_order(self, order_service):
        with pytest.raises(NotFoundError):
            await order_service.update_delivery_status(12345, True)

    @pytest.mark.asyncio
    async def test_delete_order(self, order_service, cart_request, test_session_factory):
        order = await order_service.create_order_from_cart(cart_request())

        assert await order_service.delete_order(order.id) is True
        assert await order_service.delete_order(order.id) is False
        assert await count_rows(test_session_factory, order.id) == (0, 0)


class TestCreateCreditNote:
    """Test credit note creation."""

    async def _order(self, order_service, cart_request):
        return await order_service.create_order_from_cart(cart_request())

    @pytest.mark.asyncio
    async def test_item_sums_override_header_totals(
        self, order_service, cart_request, cart_line, credit_note_payload
    ):
        order = await self._order(order_service, cart_request)
        request = CreateCreditNoteRequest.model_validate(
            credit_note_payload(
                order.id,
                items=[cart_line(quantity=1, totalPriceHT=15, totalPriceTTC=18, unitPriceTTC=18, unitPriceHT=15)],
            )
        )

        credit_note = await order_service.create_credit_note(request)

        assert credit_note.status == CreditNoteStatus.PENDING
        assert credit_note.total_amount_ht == Decimal("15.00")
        assert credit_note.total_amount_ttc == Decimal("18.00")
        assert len(credit_note.items) == 1

    @pytest.mark.asyncio
    async def test_without_items_keeps_caller_totals(
        self, order_service, cart_request, credit_note_payload
    ):
        order = await self._order(order_service, cart_request)
        request = CreateCreditNoteRequest.model_validate(
            credit_note_payload(order.id, totalAmountHT="8.5", totalAmountTTC="10.2")
        )

        credit_note = await order_service.create_credit_note(request)

        assert credit_note.total_amount_ttc == Decimal("10.20")
        assert credit_note.items == []

    @pytest.mark.asyncio
    async def test_reason_required(self, order_service, credit_note_payload):
        request = CreateCreditNoteRequest.model_validate(credit_note_payload(1, reason=""))

        with pytest.raises(ValidationError, match="reason required"):
            await order_service.create_credit_note(request)

    @pytest.mark.asyncio
    async def test_unknown_order(self, order_service, credit_note_payload):
        request = CreateCreditNoteRequest.model_validate(credit_note_payload(999))

        with pytest.raises(NotFoundError, match="order not found"):
            await order_service.create_credit_note(request)

    @pytest.mark.asyncio
    async def test_invalid_item_rolls_back_header(
        self, order_service, cart_request, cart_line, credit_note_payload
    ):
        order = await self._order(order_service, cart_request)
        request = CreateCreditNoteRequest.model_validate(
            credit_note_payload(order.id, items=[cart_line(quantity=0)])
        )

        with pytest.raises(CreditNoteCreationFailed) as exc_info:
            await order_service.create_credit_note(request)

        assert exc_info.value.stage == CreationStage.HEADER_WRITTEN.value
        assert await order_service.list_credit_notes_by_customer(7) == []


class TestCreditNoteStatus:
    @pytest.mark.asyncio
    async def test_invalid_status_leaves_status_unchanged(
        self, order_service, cart_request, credit_note_payload
    ):
        order = await order_service.create_order_from_cart(cart_request())
        credit_note = await order_service.create_credit_note(
            CreateCreditNoteRequest.model_validate(
                credit_note_payload(order.id, totalAmountHT=1, totalAmountTTC=1)
            )
        )

        with pytest.raises(ValidationError):
            await order_service.update_credit_note_status(credit_note.id, "shipped")

        [stored] = await order_service.list_credit_notes_by_customer(7)
        assert stored.status == CreditNoteStatus.PENDING

    @pytest.mark.asyncio
    async def test_refund_then_same_status_is_noop(
        self, order_service, cart_request, credit_note_payload
    ):
        order = await order_service.create_order_from_cart(cart_request())
        credit_note = await order_service.create_credit_note(
            CreateCreditNoteRequest.model_validate(
                credit_note_payload(order.id, totalAmountHT=1, totalAmountTTC=1)
            )
        )

        refunded = await order_service.update_credit_note_status(credit_note.id, "refunded")
        again = await order_service.update_credit_note_status(credit_note.id, "refunded")

        assert refunded.status == CreditNoteStatus.REFUNDED
        assert again.status == CreditNoteStatus.REFUNDED
        with pytest.raises(ValidationError):
            await order_service.update_credit_note_status(credit_note.id, "pending")

    @pytest.mark.asyncio
    async def test_unknown_credit_note(self, order_service):
        with pytest.raises(NotFoundError, match="credit note not found"):
            await order_service.update_credit_note_status(999, "refunded")
