from twilio.base.exceptions import TwilioException
from twilio.rest import Client
import logging
from app.core.config import settings
from app.domain.entities import CODOrder, OrderRecord
from app.utils.formatting import format_amount, format_delivery_date

logger = logging.getLogger(__name__)

class NotificationService:
    def __init__(self):
        self.client = None
        self.enabled = False

        # Only initialize if credentials exist in .env
        if settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN:
            try:
                self.client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
                self.enabled = True
                print("✅ NotificationService: Twilio Client Initialized")
            except TwilioException as e:
                logger.error(f"❌ Failed to initialize Twilio Client: {e}")
        else:
            print("⚠️ NotificationService: Credentials missing in .env. Notifications disabled.")

    def notify_admin_new_order(self, order: OrderRecord):
        """Sends a WhatsApp message to the Admin for a confirmed order."""
        if not self.enabled or not settings.ADMIN_PHONE_NUMBER or not settings.TWILIO_FROM_NUMBER:
            logger.info(f"NotificationService disabled, skipping order {order.order_id}")
            return

        try:
            self.client.messages.create(
                from_=_whatsapp(settings.TWILIO_FROM_NUMBER),
                body=build_order_message(order),
                to=_whatsapp(settings.ADMIN_PHONE_NUMBER)
            )
            logger.info(f"✅ Admin Notification Sent for order {order.order_id}")
        except TwilioException as e:
            logger.error(f"❌ Failed to send Admin Notification: {e}")


def _whatsapp(number: str) -> str:
    # Twilio requires the "whatsapp:" prefix
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


def build_order_message(order: OrderRecord) -> str:
    order_summary = "\n".join(
        f"- {item.quantity}x {item.name}" for item in order.line_items
    )
    if isinstance(order, CODOrder):
        payment = (
            f"💵 Cash on Delivery: {format_amount(order.total_amount)} "
            f"(incl. {format_amount(order.handling_fee)} handling)\n"
            f"🚚 Est. delivery: {format_delivery_date(order.estimated_delivery_date)}"
        )
    else:
        payment = f"💳 Paid online: {format_amount(order.amount)}"

    return (
        f"🔔 *NEW ORDER {order.order_id}*\n\n"
        f"👤 {order.customer_info.name} ({order.customer_info.phone})\n"
        f"📍 {order.customer_info.address}\n"
        f"🛒 Items:\n{order_summary}\n\n"
        f"{payment}"
    )
