from decimal import Decimal

from hypothesis import given, settings, strategies as st

from retail_checkout import (
    BookProduct,
    ClothingProduct,
    ElectronicProduct,
    ShoppingCart,
    StateError,
    ValidationError,
)

STARTING_STOCK = 10

product_index = st.integers(min_value=0, max_value=2)
quantity = st.integers(min_value=-2, max_value=STARTING_STOCK + 2)
percentage = st.decimals(min_value=0, max_value=100, places=2)

operation = st.one_of(
    st.tuples(st.just("add"), product_index, quantity),
    st.tuples(st.just("update"), product_index, quantity),
    st.tuples(st.just("remove"), product_index),
    st.tuples(st.just("discount"), product_index, percentage),
    st.tuples(st.just("round_trip"), product_index, quantity),
)


def make_products():
    return [
        ElectronicProduct("E001", "Gaming Laptop", Decimal('1200.00'), STARTING_STOCK,
                          weight=2.5),
        BookProduct("B001", "Python Programming Guide", Decimal('45.99'), STARTING_STOCK,
                    weight=0.8),
        ClothingProduct("C001", "Casual Shirt", Decimal('29.99'), STARTING_STOCK,
                        weight=0.3),
    ]


def state_of(cart, products):
    return [(p.get_price(), p.get_inventory_count(), cart.contains(p), cart.get_quantity(p))
            for p in products]


def run(op, cart, product):
    name = op[0]
    if name == "add":
        cart.add_product(product, op[2])
    elif name == "update":
        cart.update_quantity(product, op[2])
    elif name == "remove":
        cart.remove_product(product)
    elif name == "discount":
        product.apply_discount(op[2])
    else:
        before = product.get_inventory_count()
        product.decrease_inventory(op[2])
        product.increase_inventory(op[2])
        assert product.get_inventory_count() == before


@settings(max_examples=300, deadline=None)
@given(st.lists(operation, max_size=40))
def test_cart_operations_preserve_stock_and_price(ops):
    products = make_products()
    cart = ShoppingCart()

    for op in ops:
        product = products[op[1]]
        before = state_of(cart, products)
        try:
            run(op, cart, product)
        except (StateError, ValidationError):
            assert state_of(cart, products) == before

        for p in products:
            assert p.get_price() > 0
            assert p.get_inventory_count() >= 0
            assert p.get_inventory_count() + cart.get_quantity(p) == STARTING_STOCK
            if cart.contains(p):
                assert cart.get_quantity(p) >= 0


@settings(max_examples=200, deadline=None)
@given(st.lists(st.tuples(product_index, st.integers(min_value=1, max_value=5)),
                min_size=1, max_size=10))
def test_removing_everything_restores_starting_stock(additions):
    products = make_products()
    cart = ShoppingCart()

    for index, amount in additions:
        try:
            cart.add_product(products[index], amount)
        except StateError:
            pass

    for p in products:
        cart.remove_product(p)

    assert cart.is_empty()
    assert [p.get_inventory_count() for p in products] == [STARTING_STOCK] * 3
