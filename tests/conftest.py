from datetime import datetime
from decimal import Decimal

import pytest

from retail_checkout import (
    BookProduct,
    ClothingProduct,
    Customer,
    ElectronicProduct,
    MembershipLevel,
    OrderIdGenerator,
)


@pytest.fixture
def laptop():
    return ElectronicProduct("E001", "Gaming Laptop", Decimal('1200.00'), 10,
                             warranty_months=24, weight=2.5)


@pytest.fixture
def book():
    return BookProduct("B001", "Python Programming Guide", Decimal('45.99'), 50,
                       author="John Smith", isbn="978-3-16-148410-0", weight=0.8)


@pytest.fixture
def shirt():
    return ClothingProduct("C001", "Casual Shirt", Decimal('29.99'), 100,
                           size="L", color="Blue", weight=0.3)


@pytest.fixture
def customer():
    return Customer("Alice Johnson", "alice@example.com",
                    address="123 Main St, Anytown, USA",
                    membership_level=MembershipLevel.PREMIUM)


@pytest.fixture
def id_generator():
    """Fresh counter so id assertions don't depend on test order"""
    return OrderIdGenerator()


@pytest.fixture
def order_date():
    return datetime(2023, 5, 1, 10, 30, 0)
