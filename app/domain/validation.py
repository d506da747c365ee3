import re
from typing import Dict

from app.domain.entities import CustomerInfo

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
NON_DIGITS = re.compile(r"\D")
PHONE_DIGITS = 10


def normalize_phone(phone: str) -> str:
    return NON_DIGITS.sub("", phone)


def validate_customer_info(info: CustomerInfo) -> Dict[str, str]:
    """Return one message per invalid field. An empty dict means the details are complete."""
    errors: Dict[str, str] = {}

    if not info.name.strip():
        errors["name"] = "Name is required"

    if not info.email.strip():
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(info.email):
        errors["email"] = "Email is invalid"

    if not info.phone.strip():
        errors["phone"] = "Phone is required"
    elif len(normalize_phone(info.phone)) != PHONE_DIGITS:
        errors["phone"] = "Phone must be 10 digits"

    if not info.address.strip():
        errors["address"] = "Address is required"

    return errors
