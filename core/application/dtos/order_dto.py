"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from core.domain.entities import Order, OrderAddress, OrderItem
from core.domain.enums import AddressType
from core.domain.value_objects import Totals

from .base import CamelModel


class LineItemDTO(CamelModel):
    """Line item as submitted by a cart or a credit note request.

    Kept permissive on purpose: sale-time invariants are enforced by the
    domain entities so callers get the domain error message.
    """

    product_id: Optional[int] = Field(None, description="Catalog product id")
    product_name: Optional[str] = Field(None, description="Product name snapshot")
    description: Optional[str] = Field(None, description="Product description snapshot")
    image_url: Optional[str] = Field(None, description="Product image snapshot")
    quantity: Optional[int] = Field(None, description="Quantity")
    unit_price_ht: Decimal = Field(Decimal("0"), alias="unitPriceHT")
    unit_price_ttc: Decimal = Field(Decimal("0"), alias="unitPriceTTC")
    vat_rate: Decimal = Field(Decimal("0"), description="VAT rate in percent")
    total_price_ht: Decimal = Field(Decimal("0"), alias="totalPriceHT")
    total_price_ttc: Decimal = Field(Decimal("0"), alias="totalPriceTTC")

    def to_order_item(self) -> OrderItem:
        return OrderItem(**self._line_fields())

    def _line_fields(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "description": self.description,
            "image_url": self.image_url,
            "quantity": self.quantity,
            "unit_price_ht": self.unit_price_ht,
            "unit_price_ttc": self.unit_price_ttc,
            "vat_rate": self.vat_rate,
            "total_price_ht": self.total_price_ht,
            "total_price_ttc": self.total_price_ttc,
        }


class CartDTO(CamelModel):
    """Cart snapshot submitted at checkout."""

    items: List[LineItemDTO] = Field(default_factory=list, description="Cart lines")
    subtotal: Decimal = Field(Decimal("0"), description="Cart total HT")
    tax: Decimal = Field(Decimal("0"), description="Cart VAT amount")
    total: Decimal = Field(Decimal("0"), description="Cart total TTC")


class CustomerDataDTO(CamelModel):
    """Customer identity captured at checkout."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None

    def to_snapshot(self) -> Optional[Dict[str, Any]]:
        """Snapshot stored on the order; None without an email."""
        if not self.email or not self.email.strip():
            return None
        return self.model_dump(by_alias=True, exclude_none=True)


class AddressDataDTO(CamelModel):
    """Shipping and billing addresses captured at checkout."""

    shipping: Optional[Dict[str, Any]] = None
    billing: Optional[Dict[str, Any]] = None
    use_same_billing_address: bool = False

    def billing_to_store(self) -> Optional[Dict[str, Any]]:
        """Billing snapshot, unless it just repeats the shipping address."""
        if self.use_same_billing_address or not self.billing:
            return None
        if self.billing == self.shipping:
            return None
        return self.billing


class CreateOrderFromCartRequest(CamelModel):
    """Request DTO for materializing an order from a cart."""

    cart: CartDTO = Field(default_factory=CartDTO)
    customer_id: Optional[int] = Field(None, description="Registered customer id")
    customer_data: Optional[CustomerDataDTO] = Field(None, description="Guest/customer identity")
    address_data: Optional[AddressDataDTO] = None
    payment_reference: Optional[str] = Field(None, description="Idempotency key")
    payment_method: Optional[str] = Field(None, description="Payment method")
    notes: str = ""


class UpdateDeliveryStatusRequest(CamelModel):
    delivered: bool


class OrderItemResponse(CamelModel):
    """Response DTO for an order item."""

    id: Optional[int] = None
    order_id: Optional[int] = None
    product_id: int
    product_name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    quantity: int
    unit_price_ht: Decimal = Field(..., alias="unitPriceHT")
    unit_price_ttc: Decimal = Field(..., alias="unitPriceTTC")
    vat_rate: Decimal
    total_price_ht: Decimal = Field(..., alias="totalPriceHT")
    total_price_ttc: Decimal = Field(..., alias="totalPriceTTC")
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            order_id=item.order_id,
            product_id=item.product_id,
            product_name=item.product_name,
            description=item.description,
            image_url=item.image_url,
            quantity=item.quantity,
            unit_price_ht=item.unit_price_ht,
            unit_price_ttc=item.unit_price_ttc,
            vat_rate=item.vat_rate,
            total_price_ht=item.total_price_ht,
            total_price_ttc=item.total_price_ttc,
            created_at=item.created_at,
        )


class OrderAddressResponse(CamelModel):
    id: Optional[int] = None
    order_id: Optional[int] = None
    address_type: AddressType
    address_snapshot: Dict[str, Any]

    @classmethod
    def from_entity(cls, address: OrderAddress) -> "OrderAddressResponse":
        return cls(
            id=address.id,
            order_id=address.order_id,
            address_type=address.address_type,
            address_snapshot=address.address_snapshot,
        )


class OrderResponse(CamelModel):
    """Response DTO for order details."""

    id: int
    customer_id: Optional[int] = None
    customer_snapshot: Optional[Dict[str, Any]] = None
    total_amount_ht: Decimal = Field(..., alias="totalAmountHT")
    total_amount_ttc: Decimal = Field(..., alias="totalAmountTTC")
    payment_method: str
    payment_reference: Optional[str] = None
    notes: str = ""
    delivered: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)
    addresses: List[OrderAddressResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, order: Order, totals: Optional[Totals] = None) -> "OrderResponse":
        """Build the response; totals override the cached header columns."""
        totals = totals or order.stored_totals
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            customer_snapshot=order.customer_snapshot,
            total_amount_ht=totals.total_ht,
            total_amount_ttc=totals.total_ttc,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            notes=order.notes,
            delivered=order.delivered,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[OrderItemResponse.from_entity(item) for item in order.items],
            addresses=[OrderAddressResponse.from_entity(address) for address in order.addresses],
        )
