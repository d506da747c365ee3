from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- Service ---
    PROJECT_NAME: str = "Jewelry_Storefront"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite:///./storefront.db"
    REDIS_URL: str | None = None
    ORDER_STORE: str = "sql"  # "sql" or "local"

    # --- Payment Gateway (secrets stay server-side) ---
    GATEWAY_KEY_ID: str = "rzp_test_1234567890"
    GATEWAY_KEY_SECRET: str = "dev_gateway_secret"
    GATEWAY_WEBHOOK_SECRET: str = "dev_webhook_secret"
    MERCHANT_NAME: str = "Mrugaya Jewelry"
    THEME_COLOR: str = "#DC2626"
    CURRENCY: str = "INR"

    # --- UPI QR ---
    UPI_PAYEE_VPA: str = "mrugaya@razorpay"
    UPI_PAYEE_NAME: str = "Mrugaya Jewelry"
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"

    # --- Cash on Delivery ---
    COD_HANDLING_FEE: Decimal = Decimal("50")
    COD_DELIVERY_DAYS: int = 7

    # --- Checkout UX (seconds before the cart is cleared) ---
    SUCCESS_DISPLAY_DELAY: float = 3.0
    COD_DISPLAY_DELAY: float = 5.0

    # --- Shopper sessions (idle seconds before a session is ended) ---
    SESSION_TTL: float = 3600

    STORE_TIMEZONE: str = "Asia/Kolkata"
    FAVORITES_KEY: str = "mrugaya_favorites"

    # --- Admin Notifications (optional) ---
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_FROM_NUMBER: str | None = None
    ADMIN_PHONE_NUMBER: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"  # unknown .env keys (POSTGRES_*, etc.) must not crash startup
    )

settings = Settings()
