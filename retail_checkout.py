from enum import Enum
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Tuple
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from dataclasses import dataclass
from threading import Lock
import logging

logger = logging.getLogger(__name__)


# ==================== Enums ====================

class ProductType(Enum):
    """Closed set of product variants"""
    ELECTRONIC = "electronic"
    BOOK = "book"
    CLOTHING = "clothing"


class MembershipLevel(Enum):
    """Customer membership tiers"""
    REGULAR = "Regular"
    PREMIUM = "Premium"
    VIP = "VIP"


class ShippingMethod(Enum):
    """Shipping speed options"""
    STANDARD = "Standard"
    EXPRESS = "Express"
    NEXT_DAY = "NextDay"


class OrderStatus(Enum):
    """Order lifecycle"""
    PENDING = "pending"
    PROCESSED = "processed"


# ==================== Pricing Tables ====================

CENT = Decimal('0.01')

TAX_RATES: Dict[ProductType, Decimal] = {
    ProductType.ELECTRONIC: Decimal('0.0825'),
    ProductType.BOOK: Decimal('0.06'),
    ProductType.CLOTHING: Decimal('0.075'),
}

LOYALTY_DISCOUNT_PERCENTAGES: Dict[MembershipLevel, Decimal] = {
    MembershipLevel.REGULAR: Decimal('0'),
    MembershipLevel.PREMIUM: Decimal('5'),
    MembershipLevel.VIP: Decimal('10'),
}

# Cost per kg of shipped weight
SHIPPING_RATES: Dict[ShippingMethod, Decimal] = {
    ShippingMethod.STANDARD: Decimal('1'),
    ShippingMethod.EXPRESS: Decimal('3'),
    ShippingMethod.NEXT_DAY: Decimal('5'),
}

MINIMUM_SHIPPING_COST = Decimal('5.00')

# Receipts show every discountable item as marked up then discounted by this
# rate, whatever discount was actually applied to the product.
RECEIPT_MARKUP_RATE = Decimal('0.10')


# ==================== Errors ====================

class CheckoutError(Exception):
    """Base class for checkout domain errors"""


class ValidationError(CheckoutError, ValueError):
    """Malformed argument passed to a constructor or operation"""


class StateError(CheckoutError):
    """Operation conflicts with the current state of an object"""


# ==================== Helpers ====================

def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal without binary float drift"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_money(amount: Decimal) -> str:
    """Render an amount as $1,234.56"""
    rounded = to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    if rounded < 0:
        return f"-${-rounded:,.2f}"
    return f"${rounded:,.2f}"


def format_percentage(percentage: Decimal) -> str:
    return f"{to_decimal(percentage).normalize():f}%"


def _require_text(value: Optional[str], message: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(message)
    return value


# ==================== Products ====================

class Product(ABC):
    """
    Sellable item with price, stock and shipping weight.

    Price only changes through apply_discount() and inventory only through
    decrease_inventory()/increase_inventory(), so price > 0 and
    inventory >= 0 hold for the lifetime of the object.
    """

    PRODUCT_TYPE: ProductType

    def __init__(self, product_id: str, name: str, price: Decimal,
                 inventory_count: int, is_discountable: bool,
                 description: str = "No description", weight: float = 0.0):
        _require_text(product_id, "Product ID cannot be empty.")
        _require_text(name, "Name cannot be empty.")
        price = to_decimal(price)
        if price <= 0:
            raise ValidationError("Price must be positive.")
        if inventory_count < 0:
            raise ValidationError("Inventory cannot be negative.")

        self._product_id = product_id
        self._name = name
        self._description = description
        self._price = price
        self._inventory_count = inventory_count
        self._is_discountable = is_discountable
        self._weight = 0.0
        self.set_weight(weight)

    def get_id(self) -> str:
        return self._product_id

    def get_name(self) -> str:
        return self._name

    def get_description(self) -> str:
        return self._description

    def set_description(self, description: str) -> None:
        self._description = description

    def get_price(self) -> Decimal:
        return self._price

    def get_inventory_count(self) -> int:
        return self._inventory_count

    def is_discountable(self) -> bool:
        return self._is_discountable

    def get_weight(self) -> float:
        """Shipping weight in kg"""
        return self._weight

    def set_weight(self, weight: float) -> None:
        if weight < 0:
            raise ValidationError("Weight cannot be negative.")
        self._weight = weight

    def get_product_type(self) -> ProductType:
        return self.PRODUCT_TYPE

    def get_tax_rate(self) -> Decimal:
        return TAX_RATES[self.get_product_type()]

    def calculate_tax(self) -> Decimal:
        """Tax on one unit at the current price"""
        return self._price * self.get_tax_rate()

    def apply_discount(self, percentage) -> Decimal:
        """
        Permanently reduce the price by a percentage and return the new price.

        Repeated calls compound on the already discounted price.
        """
        if not self._is_discountable:
            raise StateError(f"{self._name} is not discountable.")

        percentage = to_decimal(percentage)
        if percentage < 0 or percentage > 100:
            raise ValidationError("Percentage must be between 0 and 100.")

        new_price = self._price - (self._price * percentage) / 100
        if new_price <= 0:
            raise ValidationError("Discount would make price non-positive.")

        logger.debug(f"Discounted {self._product_id} by {percentage}%: "
                     f"{self._price} -> {new_price}")
        self._price = new_price
        return self._price

    def decrease_inventory(self, quantity: int) -> None:
        """Take units out of stock"""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative.")
        if quantity > self._inventory_count:
            raise StateError(
                f"Product '{self._name}' ({self._product_id}) is out of stock.")

        self._inventory_count -= quantity
        logger.debug(f"Inventory of {self._product_id} decreased by {quantity} "
                     f"to {self._inventory_count}")

    def increase_inventory(self, quantity: int) -> None:
        """Return units to stock"""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative.")

        self._inventory_count += quantity
        logger.debug(f"Inventory of {self._product_id} increased by {quantity} "
                     f"to {self._inventory_count}")

    def get_details(self) -> str:
        return (f"{self._name} ({self._product_id}) - {self._description}, "
                f"Price: {format_money(self._price)}, "
                f"In Stock: {self._inventory_count}")

    @abstractmethod
    def get_receipt_details(self) -> Optional[str]:
        """Variant detail line printed on receipts, None to omit it"""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._product_id}, {self._price})"


class ElectronicProduct(Product):
    """Electronics carry a warranty"""

    PRODUCT_TYPE = ProductType.ELECTRONIC

    def __init__(self, product_id: str, name: str, price: Decimal,
                 inventory_count: int, warranty_months: int = 0,
                 weight: float = 0.0):
        super().__init__(product_id, name, price, inventory_count, True,
                         "Electronic Product", weight)
        self._warranty_months = 0
        self.set_warranty_months(warranty_months)

    def get_warranty_months(self) -> int:
        return self._warranty_months

    def set_warranty_months(self, months: int) -> None:
        if months < 0:
            raise ValidationError("Warranty cannot be negative.")
        self._warranty_months = months

    def get_details(self) -> str:
        return (super().get_details() +
                f", Warranty: {self._warranty_months} months, "
                f"Weight: {self._weight} kg")

    def get_receipt_details(self) -> Optional[str]:
        return None


class BookProduct(Product):
    """Printed book"""

    PRODUCT_TYPE = ProductType.BOOK

    def __init__(self, product_id: str, name: str, price: Decimal,
                 inventory_count: int, author: str = "Unknown",
                 isbn: str = "Unknown", weight: float = 0.0):
        super().__init__(product_id, name, price, inventory_count, True,
                         "Book Product", weight)
        self._author = author
        self._isbn = isbn

    def get_author(self) -> str:
        return self._author

    def set_author(self, author: str) -> None:
        self._author = author

    def get_isbn(self) -> str:
        return self._isbn

    def set_isbn(self, isbn: str) -> None:
        self._isbn = isbn

    def get_details(self) -> str:
        return (super().get_details() +
                f", Author: {self._author}, ISBN: {self._isbn}, "
                f"Weight: {self._weight} kg")

    def get_receipt_details(self) -> Optional[str]:
        return f"Author: {self._author}, ISBN: {self._isbn}"


class ClothingProduct(Product):
    """Apparel; never discountable"""

    PRODUCT_TYPE = ProductType.CLOTHING

    def __init__(self, product_id: str, name: str, price: Decimal,
                 inventory_count: int, size: str = "Unknown",
                 color: str = "Unknown", weight: float = 0.0):
        super().__init__(product_id, name, price, inventory_count, False,
                         "Clothing Product", weight)
        self._size = size
        self._color = color

    def get_size(self) -> str:
        return self._size

    def set_size(self, size: str) -> None:
        self._size = size

    def get_color(self) -> str:
        return self._color

    def set_color(self, color: str) -> None:
        self._color = color

    def get_details(self) -> str:
        return (super().get_details() +
                f", Size: {self._size}, Color: {self._color}, "
                f"Weight: {self._weight} kg")

    def get_receipt_details(self) -> Optional[str]:
        return f"Size: {self._size}, Color: {self._color}"


# ==================== Cart ====================

class ShoppingCart:
    """
    Products reserved by a customer.

    Entries are keyed by Product object identity, so two instances sharing a
    product id are separate entries. Every unit in the cart has been taken
    out of the product's inventory; removing or reducing an entry puts the
    units back.
    """

    def __init__(self):
        self._items: Dict[Product, int] = {}

    def add_product(self, product: Product, quantity: int) -> None:
        """Reserve quantity units of product and add them to the cart"""
        if quantity <= 0:
            raise ValidationError("Quantity must be positive.")
        if product.get_inventory_count() < quantity:
            logger.warning(f"Refused to reserve {quantity}x {product.get_id()}: "
                           f"{product.get_inventory_count()} in stock")
            raise StateError(
                f"Product '{product.get_name()}' ({product.get_id()}) is out of stock.")

        product.decrease_inventory(quantity)
        self._items[product] = self._items.get(product, 0) + quantity
        logger.debug(f"Cart now holds {self._items[product]}x {product.get_id()}")

    def remove_product(self, product: Product) -> None:
        """Drop the entry and release its units; absent products are ignored"""
        if product not in self._items:
            return

        quantity = self._items.pop(product)
        product.increase_inventory(quantity)
        logger.debug(f"Removed {quantity}x {product.get_id()} from cart")

    def update_quantity(self, product: Product, new_quantity: int) -> None:
        """
        Set the quantity of an existing entry, reserving or releasing the
        difference. A quantity of zero keeps the (empty) entry.
        """
        if product not in self._items:
            raise StateError("Product not in cart.")
        if new_quantity < 0:
            raise ValidationError("Quantity cannot be negative.")

        current_quantity = self._items[product]
        if new_quantity > current_quantity:
            product.decrease_inventory(new_quantity - current_quantity)
        elif new_quantity < current_quantity:
            product.increase_inventory(current_quantity - new_quantity)

        self._items[product] = new_quantity
        logger.debug(f"Cart quantity of {product.get_id()} set to {new_quantity}")

    def clear(self) -> None:
        """Release every reservation and empty the cart"""
        for product in list(self._items):
            self.remove_product(product)

    def get_quantity(self, product: Product) -> int:
        return self._items.get(product, 0)

    def contains(self, product: Product) -> bool:
        return product in self._items

    def get_items(self) -> Dict[Product, int]:
        """Return the live item mapping (not a copy)"""
        return self._items

    def get_item_count(self) -> int:
        """Total units across all entries"""
        return sum(self._items.values())

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def get_subtotal(self) -> Decimal:
        """Sum of current price times quantity"""
        return sum((product.get_price() * quantity
                    for product, quantity in self._items.items()), Decimal('0'))

    def get_total_tax(self) -> Decimal:
        return sum((product.calculate_tax() * quantity
                    for product, quantity in self._items.items()), Decimal('0'))

    def get_total(self) -> Decimal:
        return self.get_subtotal() + self.get_total_tax()


# ==================== Customer ====================

class Customer:
    """Shopper with a membership tier and a cart of their own"""

    def __init__(self, name: str, email: str, address: str = "Unknown",
                 membership_level: MembershipLevel = MembershipLevel.REGULAR):
        self._name = _require_text(name, "Name cannot be empty.")
        self._email = _require_text(email, "Email cannot be empty.")
        self._address = address
        self._membership_level = membership_level
        self._cart = ShoppingCart()

    def get_name(self) -> str:
        return self._name

    def get_email(self) -> str:
        return self._email

    def get_address(self) -> str:
        return self._address

    def set_address(self, address: str) -> None:
        self._address = address

    def get_membership_level(self) -> MembershipLevel:
        return self._membership_level

    def set_membership_level(self, level: MembershipLevel) -> None:
        self._membership_level = level

    def get_cart(self) -> ShoppingCart:
        return self._cart

    def get_loyalty_discount_percentage(self) -> Decimal:
        return LOYALTY_DISCOUNT_PERCENTAGES[self._membership_level]

    def calculate_loyalty_discount(self) -> Decimal:
        """Tier discount on the pre-tax, pre-shipping cart subtotal"""
        return (self._cart.get_subtotal() *
                self.get_loyalty_discount_percentage() / 100)


# ==================== Shipping ====================

class ShippingCalculator(ABC):
    """Abstract shipping calculator"""

    @abstractmethod
    def calculate_shipping(self, items: Dict[Product, int],
                           method: ShippingMethod) -> Decimal:
        """Calculate shipping cost"""
        pass


class WeightBasedShipping(ShippingCalculator):
    """Per-kg rate chosen by shipping method, with a minimum charge"""

    def __init__(self, rates: Optional[Dict[ShippingMethod, Decimal]] = None,
                 minimum_cost: Decimal = MINIMUM_SHIPPING_COST):
        self._rates = dict(rates) if rates is not None else dict(SHIPPING_RATES)
        self._minimum_cost = to_decimal(minimum_cost)

    def get_rate(self, method: ShippingMethod) -> Decimal:
        return self._rates[method]

    def get_minimum_cost(self) -> Decimal:
        return self._minimum_cost

    def get_total_weight(self, items: Dict[Product, int]) -> Decimal:
        total_weight = Decimal('0')
        for product, quantity in items.items():
            total_weight += to_decimal(product.get_weight()) * quantity
        return total_weight

    def calculate_shipping(self, items: Dict[Product, int],
                           method: ShippingMethod) -> Decimal:
        cost = self.get_total_weight(items) * self.get_rate(method)
        return max(cost, self._minimum_cost)


# ==================== Order IDs ====================

class OrderIdGenerator:
    """Hands out ORD-<year>-<seq> ids from a counter starting at 1"""

    def __init__(self, start: int = 1):
        self._next_sequence = start
        self._lock = Lock()

    def next_id(self, year: int) -> str:
        with self._lock:
            sequence = self._next_sequence
            self._next_sequence += 1
        return f"ORD-{year}-{sequence:03d}"

    def peek(self) -> int:
        """Sequence number the next id will use"""
        with self._lock:
            return self._next_sequence


_default_id_generator = OrderIdGenerator()


def get_default_id_generator() -> OrderIdGenerator:
    """Process-wide generator used when an Order is not given one"""
    return _default_id_generator


# ==================== Receipt ====================

@dataclass(frozen=True)
class ReceiptLine:
    """One product entry on a receipt"""
    product_id: str
    name: str
    original_price: Decimal
    discount: Decimal
    discount_percentage: Decimal
    quantity: int
    subtotal: Decimal
    tax: Decimal
    details: Optional[str] = None

    def render(self) -> str:
        lines = [
            f"{self.name} ({self.product_id})",
            f"Original Price: {format_money(self.original_price)}",
            f"Discount: {format_money(self.discount)} "
            f"({format_percentage(self.discount_percentage)})",
            f"Quantity: {self.quantity}",
            f"Subtotal: {format_money(self.subtotal)}",
            f"Tax: {format_money(self.tax)}",
        ]
        if self.details is not None:
            lines.append(f"Details: {self.details}")
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class Receipt:
    """Priced summary of an order"""
    order_id: str
    order_date: datetime
    customer_name: str
    customer_email: str
    customer_address: str
    membership_level: MembershipLevel
    lines: Tuple[ReceiptLine, ...]
    subtotal: Decimal
    tax: Decimal
    loyalty_discount: Decimal
    loyalty_percentage: Decimal
    shipping: Decimal
    shipping_method: ShippingMethod
    total: Decimal

    def render(self) -> str:
        level = self.membership_level.value
        receipt = "====== ORDER RECEIPT ======\n"
        receipt += f"Order ID: {self.order_id}\n"
        receipt += f"Date: {self.order_date.strftime('%Y-%m-%d %H:%M:%S')}\n"
        receipt += f"Customer: {self.customer_name}\n"
        receipt += f"Email: {self.customer_email}\n"
        receipt += f"Address: {self.customer_address}\n"
        receipt += f"Membership: {level}\n"
        receipt += "Items:\n"
        for line in self.lines:
            receipt += line.render()
        receipt += "Order Summary:\n"
        receipt += f"Subtotal: {format_money(self.subtotal)}\n"
        receipt += f"Tax: {format_money(self.tax)}\n"
        receipt += (f"Loyalty Discount: {format_money(self.loyalty_discount)} "
                    f"({format_percentage(self.loyalty_percentage)} {level} membership)\n")
        receipt += (f"Shipping: {format_money(self.shipping)} "
                    f"({self.shipping_method.value})\n")
        receipt += f"Total: {format_money(self.total)}\n"
        receipt += "Thank you for shopping with us!\n"
        receipt += "============================\n"
        return receipt

    def __str__(self) -> str:
        return self.render()


# ==================== Order ====================

class Order:
    """Snapshot of a customer's cart at checkout"""

    def __init__(self, customer: Customer, order_id: str = "",
                 shipping_method: ShippingMethod = ShippingMethod.STANDARD,
                 shipping_calculator: Optional[ShippingCalculator] = None,
                 id_generator: Optional[OrderIdGenerator] = None,
                 order_date: Optional[datetime] = None):
        self._customer = customer
        self._order_date = order_date or datetime.now()
        if not order_id:
            generator = id_generator or get_default_id_generator()
            order_id = generator.next_id(self._order_date.year)
        self._order_id = order_id
        self._shipping_method = shipping_method
        self._shipping_calculator = shipping_calculator or WeightBasedShipping()
        self._items: Dict[Product, int] = dict(customer.get_cart().get_items())
        self._status = OrderStatus.PENDING

        logger.info(f"Created order {self._order_id} for {customer.get_name()} "
                    f"with {len(self._items)} line(s)")

    def get_id(self) -> str:
        return self._order_id

    def get_customer(self) -> Customer:
        return self._customer

    def get_order_date(self) -> datetime:
        return self._order_date

    def get_shipping_method(self) -> ShippingMethod:
        return self._shipping_method

    def set_shipping_method(self, method: ShippingMethod) -> None:
        self._shipping_method = method

    def get_items(self) -> Dict[Product, int]:
        """Copy of the items captured at construction"""
        return dict(self._items)

    def get_status(self) -> OrderStatus:
        return self._status

    def calculate_shipping_cost(self) -> Decimal:
        return self._shipping_calculator.calculate_shipping(
            self._items, self._shipping_method)

    def process_order(self,
                      processor: Optional[Callable[['Order'], None]] = None) -> None:
        """Hand the order to payment/fulfilment, if a processor is given"""
        logger.info(f"Processing order {self._order_id} for {self._customer.get_name()}")
        if processor is not None:
            processor(self)
        self._status = OrderStatus.PROCESSED

    def build_receipt(self) -> Receipt:
        """Price every snapshot line and assemble the order totals"""
        subtotal = Decimal('0')
        tax = Decimal('0')
        lines = []

        for product, quantity in self._items.items():
            price = product.get_price()
            line_subtotal = price * quantity
            line_tax = product.calculate_tax() * quantity
            subtotal += line_subtotal
            tax += line_tax

            if product.is_discountable():
                display_discount = price * RECEIPT_MARKUP_RATE
                display_percentage = RECEIPT_MARKUP_RATE * 100
            else:
                display_discount = Decimal('0')
                display_percentage = Decimal('0')

            lines.append(ReceiptLine(
                product_id=product.get_id(),
                name=product.get_name(),
                original_price=price + price * RECEIPT_MARKUP_RATE,
                discount=display_discount,
                discount_percentage=display_percentage,
                quantity=quantity,
                subtotal=line_subtotal,
                tax=line_tax,
                details=product.get_receipt_details(),
            ))

        loyalty_discount = self._customer.calculate_loyalty_discount()
        shipping = self.calculate_shipping_cost()

        return Receipt(
            order_id=self._order_id,
            order_date=self._order_date,
            customer_name=self._customer.get_name(),
            customer_email=self._customer.get_email(),
            customer_address=self._customer.get_address(),
            membership_level=self._customer.get_membership_level(),
            lines=tuple(lines),
            subtotal=subtotal,
            tax=tax,
            loyalty_discount=loyalty_discount,
            loyalty_percentage=self._customer.get_loyalty_discount_percentage(),
            shipping=shipping,
            shipping_method=self._shipping_method,
            total=subtotal + tax + shipping - loyalty_discount,
        )

    def generate_receipt(self) -> str:
        return self.build_receipt().render()


# ==================== Demo ====================

def print_section(title: str) -> None:
    """Print section header"""
    print(f"\n{'=' * 70}")
    print(f" {title}")
    print('=' * 70)


def demo_checkout_system():
    """Walk a premium customer through cart, discounts and checkout"""

    print_section("RETAIL CHECKOUT DEMO")

    laptop = ElectronicProduct("E001", "Gaming Laptop", Decimal('1200.00'), 10,
                               warranty_months=24, weight=2.5)
    book = BookProduct("B001", "Python Programming Guide", Decimal('45.99'), 50,
                       author="John Smith", isbn="978-3-16-148410-0", weight=0.8)
    shirt = ClothingProduct("C001", "Casual Shirt", Decimal('29.99'), 100,
                            size="L", color="Blue", weight=0.3)

    print_section("1. Catalog")
    for product in (laptop, book, shirt):
        print(f"   • {product.get_details()}")

    customer = Customer("Alice Johnson", "alice@example.com",
                        address="123 Main St, Anytown, USA",
                        membership_level=MembershipLevel.PREMIUM)

    print_section("2. Cart")
    cart = customer.get_cart()
    cart.add_product(laptop, 1)
    cart.add_product(book, 2)
    cart.add_product(shirt, 3)
    print(f"   Items: {cart.get_item_count()}")
    print(f"   Subtotal: {format_money(cart.get_subtotal())}")

    print_section("3. Discounts")
    laptop.apply_discount(10)
    book.apply_discount(5)
    try:
        shirt.apply_discount(20)
    except StateError as e:
        print(f"   ❌ {e}")
    print(f"   Loyalty discount: {format_money(customer.calculate_loyalty_discount())}")

    print_section("4. Checkout")
    order = Order(customer, "ORD-2023-001", shipping_method=ShippingMethod.EXPRESS)
    order.process_order()
    print(order.generate_receipt())

    print_section("5. Stock Validation")
    smartphone = ElectronicProduct("E002", "Smartphone", Decimal('800.00'), 0)
    try:
        cart.add_product(smartphone, 1)
    except StateError as e:
        print(f"   ❌ Error: {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s - %(levelname)s - %(message)s")
    try:
        demo_checkout_system()
    except KeyboardInterrupt:
        print("\n\n⚠️  Demo interrupted by user")
