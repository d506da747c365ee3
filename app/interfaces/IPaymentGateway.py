from abc import ABC, abstractmethod
from decimal import Decimal

from app.domain.entities import GatewayOrder, HostedCheckoutOptions, HostedCheckoutOutcome

class IPaymentGateway(ABC):
    @abstractmethod
    async def create_order(self, amount: Decimal, currency: str, receipt: str) -> GatewayOrder:
        pass

    @abstractmethod
    async def open_hosted_checkout(self, options: HostedCheckoutOptions) -> HostedCheckoutOutcome:
        """Suspends until the hosted UI reports a payment or a dismissal."""
        pass

    @abstractmethod
    def verify_payment_signature(self, gateway_order_id: str, payment_id: str, signature: str) -> bool:
        pass
