from decimal import Decimal
from urllib.parse import quote, urlencode

from app.core.exceptions import QRCodeError

# Byte-mode capacity of a version 40 QR code at the lowest error correction level
MAX_QR_BYTES = 2953


def build_upi_uri(payee_vpa: str, payee_name: str, amount: Decimal, currency: str, note: str) -> str:
    """upi://pay deep link understood by UPI apps (pa, pn, am, cu, tn)."""
    params = {
        "pa": payee_vpa,
        "pn": payee_name,
        "am": f"{Decimal(amount):f}",
        "cu": currency,
        "tn": note,
    }
    return "upi://pay?" + urlencode(params, quote_via=quote, safe="@")


class QRCodeRenderer:
    """Turns a payment URI into the URL of a scannable QR image."""

    def __init__(self, service_url: str, size: int = 300):
        self.service_url = service_url
        self.size = size

    def render(self, data: str) -> str:
        if not data:
            raise QRCodeError("Nothing to encode")
        if len(data.encode()) > MAX_QR_BYTES:
            raise QRCodeError("Payment URI too long for a QR code")
        if not self.service_url:
            raise QRCodeError("QR service is not configured")

        return f"{self.service_url}?size={self.size}x{self.size}&data={quote(data, safe='')}"
