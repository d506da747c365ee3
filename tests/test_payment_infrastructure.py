import asyncio
from decimal import Decimal
from urllib.parse import unquote

import pytest

from app.core.exceptions import PaymentGatewayError, QRCodeError
from app.domain.entities import CheckoutPrefill, HostedCheckoutOptions
from app.infrastructure import signatures
from app.infrastructure.upi_qr import MAX_QR_BYTES, QRCodeRenderer, build_upi_uri

SECRET = "test_secret"


class TestSignatures:
    def test_payment_signature_round_trip(self):
        sig = signatures.payment_signature(SECRET, "order_1", "pay_1")

        assert signatures.verify_payment_signature(SECRET, "order_1", "pay_1", sig)

    def test_tampered_inputs_fail(self):
        sig = signatures.payment_signature(SECRET, "order_1", "pay_1")

        assert not signatures.verify_payment_signature(SECRET, "order_1", "pay_2", sig)
        assert not signatures.verify_payment_signature(SECRET, "order_2", "pay_1", sig)
        assert not signatures.verify_payment_signature("other", "order_1", "pay_1", sig)
        assert not signatures.verify_payment_signature(SECRET, "order_1", "pay_1", None)

    def test_webhook_signature_covers_the_raw_body(self):
        body = b'{"event": "payment.captured"}'
        sig = signatures.sign(SECRET, body)

        assert signatures.verify_webhook_signature(SECRET, body, sig)
        assert not signatures.verify_webhook_signature(SECRET, body + b" ", sig)
        assert not signatures.verify_webhook_signature(SECRET, body, "")


class TestUpiQr:
    def test_upi_uri_carries_payee_and_amount(self):
        uri = build_upi_uri("mrugaya@razorpay", "Mrugaya Jewelry", Decimal("45999"), "INR", "Payment for Order MRG_1")

        assert uri.startswith("upi://pay?pa=mrugaya@razorpay&")
        assert "am=45999" in uri
        assert "cu=INR" in uri
        assert "pn=Mrugaya%20Jewelry" in uri

    def test_render_returns_an_image_url_for_the_data(self):
        url = QRCodeRenderer("https://qr.example/create", size=200).render("upi://pay?pa=a@b")

        base, data = url.split("&data=")
        assert base == "https://qr.example/create?size=200x200"
        assert unquote(data) == "upi://pay?pa=a@b"

    @pytest.mark.parametrize(
        "service_url, data",
        [
            ("https://qr.example/create", ""),
            ("https://qr.example/create", "x" * (MAX_QR_BYTES + 1)),
            ("", "upi://pay?pa=a@b"),
        ],
    )
    def test_render_failures(self, service_url, data):
        with pytest.raises(QRCodeError):
            QRCodeRenderer(service_url).render(data)


def options_for(order_id):
    return HostedCheckoutOptions(
        key="rzp_test",
        amount=100,
        currency="INR",
        name="Shop",
        description="test",
        order_id=order_id,
        prefill=CheckoutPrefill(name="a", email="a@b.c", contact="9876543210"),
    )


class TestSimulatedGateway:
    async def test_create_order_uses_minor_units(self, gateway):
        order = await gateway.create_order(Decimal("45999"), "INR", receipt="MRG_1")

        assert order.amount == 4599900
        assert order.amount_due == 4599900
        assert order.receipt == "MRG_1"
        assert order.id.startswith("order_")

    async def test_unavailable_gateway(self, gateway):
        gateway.fail_next_order("SDK failed to load")

        with pytest.raises(PaymentGatewayError, match="SDK failed to load"):
            await gateway.create_order(Decimal("1"), "INR", receipt="MRG_1")
        # only the next call fails
        assert await gateway.create_order(Decimal("1"), "INR", receipt="MRG_2")

    @pytest.mark.parametrize("amount", ["0", "-5", "0.001"])
    async def test_amounts_below_one_paisa_are_rejected(self, gateway, amount):
        with pytest.raises(PaymentGatewayError):
            await gateway.create_order(Decimal(amount), "INR", receipt="MRG_1")
        assert gateway.orders == {}

    async def test_one_paisa_is_accepted(self, gateway):
        order = await gateway.create_order(Decimal("0.01"), "INR", receipt="MRG_1")

        assert order.amount == 1

    async def test_hosted_checkout_resolves_with_a_signed_payment(self, gateway):
        order = await gateway.create_order(Decimal("10"), "INR", receipt="MRG_1")
        pending = asyncio.create_task(gateway.open_hosted_checkout(options_for(order.id)))
        await asyncio.sleep(0)

        assert gateway.is_open(order.id)
        payment_id = gateway.complete_payment(order.id)
        outcome = await pending

        assert outcome.payment_id == payment_id
        assert gateway.verify_payment_signature(order.id, outcome.payment_id, outcome.signature)
        assert not gateway.is_open(order.id)
        assert gateway.orders[order.id].status == "paid"

    async def test_dismiss(self, gateway):
        order = await gateway.create_order(Decimal("10"), "INR", receipt="MRG_1")
        pending = asyncio.create_task(gateway.open_hosted_checkout(options_for(order.id)))
        await asyncio.sleep(0)

        assert gateway.dismiss(order.id)
        assert (await pending).dismissed
        assert not gateway.dismiss(order.id)

    async def test_callbacks_without_an_open_checkout_are_ignored(self, gateway):
        assert not gateway.submit_callback("order_missing", "pay_1", "sig")
        assert gateway.complete_payment("order_missing") is None

    async def test_unknown_order_cannot_be_opened(self, gateway):
        with pytest.raises(PaymentGatewayError):
            await gateway.open_hosted_checkout(options_for("order_missing"))
