"""
Order Service Component Golden Tests

These tests document OrderService behavior with mocked deps.
Uses proper dependency injection - no patching needed!

Usage:
    pytest tests/component/golden/order_service -v
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from .mocks import (
    MockOrderRepository,
    MockCatalogRepository,
    MockFulfillmentProvider,
    MockAccountClient,
)

pytestmark = [pytest.mark.component, pytest.mark.golden, pytest.mark.asyncio]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_repo():
    """Create a fresh MockOrderRepository"""
    return MockOrderRepository()


@pytest.fixture
def mock_catalog():
    """Catalog with a full-price product and a discounted one"""
    catalog = MockCatalogRepository()
    catalog.set_product("prod_tee", amount=Decimal("500"), title="Cotton Tee", image="tee.jpg")
    catalog.set_product("prod_hoodie", amount=Decimal("1500"), discounted_amount=Decimal("1200"), title="Hoodie")
    catalog.set_variant_sku("var_tee_black", "TEE-BLK")
    return catalog


@pytest.fixture
def mock_provider():
    return MockFulfillmentProvider()


@pytest.fixture
def mock_account_client():
    client = MockAccountClient()
    client.set_user("usr_test_123", email="account@example.com")
    return client


@pytest.fixture
def service(mock_repo, mock_catalog, mock_provider, mock_account_client):
    from microservices.order_service.order_service import OrderService

    return OrderService(
        repository=mock_repo,
        catalog=mock_catalog,
        fulfillment_provider=mock_provider,
        account_client=mock_account_client,
    )


def make_request(shipping_address, products=None, **overrides):
    from microservices.order_service.models import OrderCreateRequest

    data = {
        "user_id": "usr_test_123",
        "products": products if products is not None else [
            {"product_id": "prod_tee", "variant_id": "var_tee_black", "size": "M", "quantity": 2}
        ],
        "shipping_address": shipping_address,
    }
    data.update(overrides)
    return OrderCreateRequest(**data)


def make_order(order_id="order_existing", **overrides):
    from microservices.order_service.models import Order

    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    data = {
        "order_id": order_id,
        "user_id": "usr_test_123",
        "items": [{
            "product_id": "prod_tee", "variant_id": "var_tee_black", "size": "M",
            "quantity": 1, "unit_price": "500", "title": "Cotton Tee",
        }],
        "shipping_address": {
            "full_name": "Asha Verma", "phone": "9876543210", "address": "12 MG Road",
            "city": "Bengaluru", "state": "Karnataka", "postal_code": "560001",
        },
        "total_amount": Decimal("500"),
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Order(**data)


# =============================================================================
# OrderService.create_order() Tests
# =============================================================================

class TestOrderServiceCreateGolden:
    """Golden: OrderService.create_order() behavior"""

    async def test_create_order_prices_from_catalog_and_registers_shipment(
        self, service, mock_repo, mock_provider, sample_shipping_address
    ):
        """GOLDEN: 2 x 500 gives 1000 and provider ids are backfilled"""
        from microservices.order_service.models import FulfillmentStatus, PaymentStatus

        result = await service.create_order(make_request(sample_shipping_address))

        assert result.success is True
        assert result.message == "Order created successfully"
        order = result.order
        assert order.total_amount == Decimal("1000")
        assert order.items[0].unit_price == Decimal("500")
        assert order.items[0].title == "Cotton Tee"
        assert order.items[0].sku == "TEE-BLK"
        assert order.payment_status == PaymentStatus.PENDING
        assert order.fulfillment_status == FulfillmentStatus.REGISTERED
        assert order.shipment_order_id == "987654"
        assert order.shipment_id == "123456"
        assert order.shipment_order_date == order.created_at.strftime("%Y-%m-%d")
        mock_provider.assert_called("create_shipment")

    async def test_order_persisted_before_provider_call(
        self, service, mock_repo, mock_provider, sample_shipping_address
    ):
        """GOLDEN: the pending outbox row is written in the insert itself"""
        await service.create_order(make_request(sample_shipping_address))

        created = mock_repo.get_calls("create_order")[0]["order_data"]
        assert created["fulfillment_status"].value == "pending"
        assert mock_repo._call_log[0]["method"] == "create_order"

    async def test_discounted_price_preferred(self, service, sample_shipping_address):
        """GOLDEN: discounted price wins over the base price"""
        request = make_request(sample_shipping_address, products=[
            {"product_id": "prod_hoodie", "variant_id": "var_h", "size": "L", "quantity": 1},
            {"product_id": "prod_tee", "variant_id": "var_tee_black", "size": "S", "quantity": 1},
        ])

        result = await service.create_order(request)

        assert result.order.items[0].unit_price == Decimal("1200")
        assert result.order.total_amount == Decimal("1700")

    async def test_zero_discount_falls_back_to_base_price(
        self, service, mock_catalog, sample_shipping_address
    ):
        mock_catalog.set_product("prod_cap", amount=Decimal("300"), discounted_amount=Decimal("0"))
        request = make_request(sample_shipping_address, products=[
            {"product_id": "prod_cap", "variant_id": "var_c", "size": "OS", "quantity": 3},
        ])

        result = await service.create_order(request)

        assert result.order.total_amount == Decimal("900")

    async def test_donation_stored_apart_from_total(self, service, mock_provider, sample_shipping_address):
        """GOLDEN: total covers the goods only, the donation has its own column"""
        request = make_request(sample_shipping_address, donation_amount=Decimal("50"))

        result = await service.create_order(request)

        assert result.order.total_amount == Decimal("1000")
        assert result.order.total_amount == sum(item.line_total for item in result.order.items)
        assert result.order.donation_amount == Decimal("50")
        shipment = mock_provider.get_calls("create_shipment")[0]["request"]
        assert shipment.sub_total == Decimal("1000")

    async def test_missing_product_raises_not_found_and_persists_nothing(
        self, service, mock_repo, mock_provider, sample_shipping_address
    ):
        """GOLDEN: unknown product aborts before any write"""
        from core.errors import NotFoundError

        request = make_request(sample_shipping_address, products=[
            {"product_id": "prod_tee", "variant_id": "var_tee_black", "size": "M", "quantity": 1},
            {"product_id": "prod_ghost", "variant_id": "var_x", "size": "M", "quantity": 1},
        ])

        with pytest.raises(NotFoundError) as exc_info:
            await service.create_order(request)

        assert "prod_ghost" in str(exc_info.value)
        mock_repo.assert_not_called("create_order")
        assert mock_repo.orders == []
        mock_provider.assert_not_called("create_shipment")

    @pytest.mark.parametrize("overrides", [
        {"user_id": None},
        {"user_id": "   "},
        {"products": []},
        {"shipping_address": None},
    ])
    async def test_invalid_request_raises_validation_error(
        self, service, mock_repo, sample_shipping_address, overrides
    ):
        from core.errors import ValidationError

        request = make_request(**{"shipping_address": sample_shipping_address, **overrides})

        with pytest.raises(ValidationError):
            await service.create_order(request)

        mock_repo.assert_not_called("create_order")

    async def test_provider_failure_keeps_order(
        self, service, mock_provider, mock_repo, sample_shipping_address
    ):
        """GOLDEN: provider rejection is logged, order still succeeds with null fields"""
        from microservices.fulfillment_service.models import ShipmentResult
        from microservices.order_service.models import FulfillmentStatus

        mock_provider.set_create_result(
            ShipmentResult.fail({"message": "Invalid pincode"}, "Failed to create shipment in Shiprocket", 422)
        )

        result = await service.create_order(make_request(sample_shipping_address))

        assert result.success is True
        assert result.order.shipment_order_id is None
        assert result.order.shipment_order_date is None
        assert result.order.shipment_id is None
        assert result.order.fulfillment_status == FulfillmentStatus.FAILED
        assert result.fulfillment_message == "Failed to create shipment in Shiprocket"
        assert len(mock_repo.orders) == 1

    async def test_provider_exception_keeps_order(
        self, service, mock_provider, sample_shipping_address
    ):
        mock_provider.set_create_error(RuntimeError("boom"))

        result = await service.create_order(make_request(sample_shipping_address))

        assert result.success is True
        assert result.order.shipment_order_id is None

    async def test_provider_success_without_order_id_treated_as_rejection(
        self, service, mock_provider, sample_shipping_address
    ):
        from microservices.fulfillment_service.models import ShipmentResult
        from microservices.order_service.models import FulfillmentStatus

        mock_provider.set_create_result(
            ShipmentResult.ok({"status_code": 422, "message": "Wrong pickup location"}, "Shipment created successfully")
        )

        result = await service.create_order(make_request(sample_shipping_address))

        assert result.order.shipment_order_id is None
        assert result.order.fulfillment_status == FulfillmentStatus.FAILED

    async def test_backfill_write_failure_does_not_fail_creation(
        self, service, mock_repo, sample_shipping_address
    ):
        mock_repo.set_update_error(RuntimeError("connection reset"))

        result = await service.create_order(make_request(sample_shipping_address))

        assert result.success is True
        assert result.order.shipment_order_id is None

    async def test_shipment_request_mapping(self, service, mock_provider, sample_shipping_address):
        """GOLDEN: cod maps to COD, address fields are denormalized"""
        await service.create_order(make_request(sample_shipping_address))

        shipment = mock_provider.get_calls("create_shipment")[0]["request"]
        assert shipment.payment_method.value == "COD"
        assert shipment.customer_name == "Asha Verma"
        assert shipment.pincode == "560001"
        assert shipment.address_2 == "Near metro"
        assert shipment.email == "asha@example.com"
        assert shipment.items[0].units == 2
        assert shipment.items[0].sku == "TEE-BLK"
        assert (shipment.length, shipment.breadth, shipment.height, shipment.weight) == (10, 10, 10, 0.5)

    async def test_gateway_payment_maps_to_prepaid(self, service, mock_provider, sample_shipping_address):
        await service.create_order(make_request(sample_shipping_address, payment_method="razorpay"))

        shipment = mock_provider.get_calls("create_shipment")[0]["request"]
        assert shipment.payment_method.value == "Prepaid"

    async def test_billing_email_falls_back_to_account(
        self, service, mock_provider, mock_account_client, sample_shipping_address
    ):
        address = {k: v for k, v in sample_shipping_address.items() if k != "email"}

        await service.create_order(make_request(address))

        shipment = mock_provider.get_calls("create_shipment")[0]["request"]
        assert shipment.email == "account@example.com"
        mock_account_client.assert_called("get_user")

    async def test_missing_sku_gets_placeholder(self, service, mock_provider, sample_shipping_address):
        request = make_request(sample_shipping_address, products=[
            {"product_id": "prod_hoodie", "variant_id": "var_unknown", "size": "L", "quantity": 1},
        ])

        await service.create_order(request)

        shipment = mock_provider.get_calls("create_shipment")[0]["request"]
        assert shipment.items[0].sku == "SKU-prod_hoodie"


# =============================================================================
# Fulfillment Retry Tests
# =============================================================================

class TestOrderServiceRetryFulfillmentGolden:
    """Golden: OrderService.retry_fulfillment() behavior"""

    async def test_retry_backfills_failed_order(self, service, mock_repo):
        from microservices.order_service.models import FulfillmentStatus

        mock_repo.set_order(make_order(fulfillment_status=FulfillmentStatus.FAILED))

        result = await service.retry_fulfillment("order_existing")

        assert result.success is True
        assert result.order.fulfillment_status == FulfillmentStatus.REGISTERED
        assert result.order.shipment_order_id == "987654"

    async def test_retry_of_registered_order_does_not_call_provider(
        self, service, mock_repo, mock_provider
    ):
        from microservices.order_service.models import FulfillmentStatus

        mock_repo.set_order(make_order(
            fulfillment_status=FulfillmentStatus.REGISTERED, shipment_order_id="111"
        ))

        result = await service.retry_fulfillment("order_existing")

        assert result.success is True
        assert result.order.shipment_order_id == "111"
        mock_provider.assert_not_called("create_shipment")

    async def test_retry_still_failing_reports_failure(self, service, mock_repo, mock_provider):
        from microservices.fulfillment_service.models import ShipmentResult
        from microservices.order_service.models import FulfillmentStatus

        mock_repo.set_order(make_order(fulfillment_status=FulfillmentStatus.FAILED))
        mock_provider.set_create_result(ShipmentResult.fail("timeout", "Failed to create shipment in Shiprocket"))

        result = await service.retry_fulfillment("order_existing")

        assert result.success is False
        assert result.order.fulfillment_status == FulfillmentStatus.FAILED

    async def test_retry_cancelled_order_conflicts(self, service, mock_repo):
        from core.errors import ConflictError

        mock_repo.set_order(make_order(is_cancelled=True))

        with pytest.raises(ConflictError):
            await service.retry_fulfillment("order_existing")


# =============================================================================
# Delivery / Cancellation Tests
# =============================================================================

class TestOrderServiceStateGolden:
    """Golden: mark_delivered() / cancel_order() behavior"""

    async def test_mark_delivered_sets_flag_and_timestamp(self, service, mock_repo):
        mock_repo.set_order(make_order())
        before = datetime.now(timezone.utc)

        order = await service.mark_delivered("order_existing")

        assert order.is_delivered is True
        assert order.delivered_at >= before

    async def test_cancel_sets_flag_and_timestamp(self, service, mock_repo):
        mock_repo.set_order(make_order())

        order = await service.cancel_order("order_existing")

        assert order.is_cancelled is True
        assert order.cancelled_at is not None

    async def test_mark_delivered_twice_keeps_delivered(self, service, mock_repo):
        mock_repo.set_order(make_order())

        await service.mark_delivered("order_existing")
        order = await service.mark_delivered("order_existing")

        assert order.is_delivered is True

    async def test_unknown_order_raises_not_found(self, service):
        from core.errors import NotFoundError

        with pytest.raises(NotFoundError):
            await service.mark_delivered("order_missing")
        with pytest.raises(NotFoundError):
            await service.cancel_order("order_missing")

    async def test_cancel_after_delivery_conflicts(self, service, mock_repo):
        """GOLDEN: delivered and cancelled are mutually exclusive"""
        from core.errors import ConflictError

        mock_repo.set_order(make_order())
        await service.mark_delivered("order_existing")

        with pytest.raises(ConflictError):
            await service.cancel_order("order_existing")

        order = await service.get_order("order_existing")
        assert order.is_cancelled is False

    async def test_deliver_after_cancel_conflicts(self, service, mock_repo):
        from core.errors import ConflictError

        mock_repo.set_order(make_order(is_cancelled=True))

        with pytest.raises(ConflictError):
            await service.mark_delivered("order_existing")

    async def test_concurrent_deliver_and_cancel_leaves_one_state(self, service, mock_repo):
        """GOLDEN: racing transitions never set both flags"""
        import asyncio
        from core.errors import ConflictError

        mock_repo.set_order(make_order())
        mock_repo.set_yield_on_io()

        results = await asyncio.gather(
            service.mark_delivered("order_existing"),
            service.cancel_order("order_existing"),
            return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(conflicts) == 1
        order = await service.get_order("order_existing")
        assert order.is_delivered != order.is_cancelled

    async def test_transitions_are_guarded_in_the_write(self, service, mock_repo):
        mock_repo.set_order(make_order())

        await service.mark_delivered("order_existing")
        mock_repo.assert_not_called("get_order")

        mock_repo.set_order(make_order(order_id="order_other"))
        await service.cancel_order("order_other")

        guards = [call["unless"] for call in mock_repo.get_calls("update_order")]
        assert guards == ["is_cancelled", "is_delivered"]


# =============================================================================
# Payment Confirmation Tests
# =============================================================================

class TestOrderServiceConfirmPaymentGolden:
    """Golden: confirm_payment() behavior"""

    async def test_confirm_payment_marks_order_paid(self, service, mock_repo):
        from microservices.order_service.models import PaymentConfirmRequest, PaymentStatus

        mock_repo.set_order(make_order(payment_method="razorpay", payment_intent_id="order_rzp_1"))

        order = await service.confirm_payment(PaymentConfirmRequest(
            payment_intent_id="order_rzp_1", payment_confirmation_id="pay_1"
        ))

        assert order.payment_status == PaymentStatus.PAID
        assert order.payment_confirmation_id == "pay_1"

    async def test_confirm_payment_unknown_intent(self, service):
        from core.errors import NotFoundError
        from microservices.order_service.models import PaymentConfirmRequest

        with pytest.raises(NotFoundError):
            await service.confirm_payment(PaymentConfirmRequest(payment_intent_id="order_rzp_missing"))

    async def test_update_payment_status_failed(self, service, mock_repo):
        from microservices.order_service.models import PaymentStatus

        mock_repo.set_order(make_order())

        order = await service.update_payment_status("order_existing", PaymentStatus.FAILED)

        assert order.payment_status == PaymentStatus.FAILED
        assert order.payment_confirmation_id is None
        assert mock_repo.get_calls("update_order")[0]["fields"] == {"payment_status": PaymentStatus.FAILED}

    async def test_update_payment_status_unknown_order(self, service):
        from core.errors import NotFoundError
        from microservices.order_service.models import PaymentStatus

        with pytest.raises(NotFoundError):
            await service.update_payment_status("order_missing", PaymentStatus.PAID)


# =============================================================================
# Query Tests
# =============================================================================

class TestOrderServiceQueriesGolden:
    """Golden: order and shipment queries"""

    async def test_get_order_not_found(self, service):
        from core.errors import NotFoundError

        with pytest.raises(NotFoundError):
            await service.get_order("order_missing")

    async def test_list_orders_pagination(self, service, mock_repo):
        for i in range(3):
            mock_repo.set_order(make_order(order_id=f"order_{i}"))

        result = await service.list_orders(page=1, page_size=2)

        assert result.count == 2
        assert result.has_next is True
        mock_repo.assert_called("list_orders")
        assert mock_repo.get_calls("list_orders")[0] == {"limit": 2, "offset": 0}

    async def test_get_user_orders(self, service, mock_repo):
        mock_repo.set_order(make_order(order_id="order_a"))
        mock_repo.set_order(make_order(order_id="order_b", user_id="usr_other"))

        orders = await service.get_user_orders("usr_test_123")

        assert [o.order_id for o in orders] == ["order_a"]

    async def test_delete_order(self, service, mock_repo):
        from core.errors import NotFoundError

        mock_repo.set_order(make_order())
        await service.delete_order("order_existing")

        assert mock_repo.orders == []
        with pytest.raises(NotFoundError):
            await service.delete_order("order_existing")

    async def test_track_shipment_passes_failure_through(self, service, mock_provider):
        """GOLDEN: provider failure envelope surfaces unchanged"""
        from microservices.fulfillment_service.models import ShipmentResult

        failure = ShipmentResult.fail({"message": "AWB not found"}, "Failed to retrieve tracking information", 404)
        mock_provider.set_track_result(failure)

        result = await service.track_shipment("123456")

        assert result == failure
        assert mock_provider.get_calls("track_shipment")[0] == {"shipment_id": "123456"}

    async def test_track_shipment_requires_id(self, service):
        from core.errors import ValidationError

        with pytest.raises(ValidationError):
            await service.track_shipment("  ")

    async def test_list_shipments_pass_through(self, service, mock_provider):
        result = await service.list_shipments(page=2, page_size=5)

        assert result.success is True
        assert mock_provider.get_calls("list_shipments")[0] == {"page": 2, "limit": 5}

    async def test_check_serviceability_uses_courier_list(self, service, mock_provider):
        from microservices.fulfillment_service.models import ShipmentResult

        mock_provider.set_serviceability_result(ShipmentResult.ok(
            {"status": 404, "data": {"available_courier_companies": [
                {"courier_name": "Delhivery", "estimated_delivery_days": "5", "rate": 70},
                {"courier_name": "Bluedart", "estimated_delivery_days": "2", "rate": 120},
            ]}},
            "Pincode serviceability checked successfully"
        ))

        result = await service.check_serviceability("110001")

        assert result.serviceable is True
        assert result.fastest.courier_name == "Bluedart"
        assert result.message == "Delivery available"
