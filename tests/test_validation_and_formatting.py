from datetime import date
from decimal import Decimal

import pytest

from app.domain.entities import CustomerInfo
from app.domain.validation import normalize_phone, validate_customer_info
from app.utils.formatting import format_amount, format_delivery_date


class TestCustomerValidation:
    def test_complete_details_have_no_errors(self, customer):
        assert validate_customer_info(customer) == {}

    def test_every_missing_field_is_reported(self):
        errors = validate_customer_info(CustomerInfo(name="  ", email="", phone="", address=""))

        assert errors == {
            "name": "Name is required",
            "email": "Email is required",
            "phone": "Phone is required",
            "address": "Address is required",
        }

    @pytest.mark.parametrize("email", ["asha", "asha@", "asha@example", "@."])
    def test_invalid_email(self, customer, email):
        errors = validate_customer_info(customer.model_copy(update={"email": email}))

        assert errors == {"email": "Email is invalid"}

    @pytest.mark.parametrize("phone", ["98765", "98765432101", "phone"])
    def test_phone_needs_ten_digits(self, customer, phone):
        errors = validate_customer_info(customer.model_copy(update={"phone": phone}))

        assert errors == {"phone": "Phone must be 10 digits"}

    def test_phone_separators_are_ignored(self, customer):
        info = customer.model_copy(update={"phone": "98765 43210"})

        assert validate_customer_info(info) == {}
        assert normalize_phone(info.phone) == "9876543210"


class TestFormatting:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("0"), "₹0"),
            (Decimal("999"), "₹999"),
            (Decimal("2999"), "₹2,999"),
            (Decimal("125999"), "₹1,25,999"),
            (Decimal("12345678"), "₹1,23,45,678"),
            (Decimal("46049.50"), "₹46,050"),
        ],
    )
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected

    def test_format_delivery_date(self):
        assert format_delivery_date(date(2026, 10, 26)) == "26/10/2026"
        assert format_delivery_date(date(2026, 1, 5)) == "5/1/2026"
