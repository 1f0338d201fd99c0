import pytest

from storefront.core.errors import InvalidInput, NotFound, ValidationError
from storefront.schemas import ProductFields
from storefront.services.cart import check_product, validate_cart


def test_validate_cart_drops_unknown_products(db, speaker):
    lines = validate_cart(db, [
        {"productId": speaker.id, "quantity": 3},
        {"productId": 9999, "quantity": 1},
    ])
    assert len(lines) == 1
    assert lines[0].id == speaker.id
    assert lines[0].quantity == 3
    assert lines[0].category_name == "Audio"


def test_validate_cart_accepts_empty_list(db):
    assert validate_cart(db, []) == []


@pytest.mark.parametrize("items", [None, "1,2", {"productId": 1}])
def test_validate_cart_requires_a_list(db, items):
    with pytest.raises(InvalidInput):
        validate_cart(db, items)


@pytest.mark.parametrize("bad", [
    {"productId": None, "quantity": 1},
    {"quantity": 1},
    {"productId": "abc", "quantity": 1},
    {"productId": 1, "quantity": 0},
    7,
])
def test_validate_cart_drops_malformed_entries(db, speaker, bad):
    lines = validate_cart(db, [{"productId": speaker.id, "quantity": 1}, bad])
    assert [line.id for line in lines] == [speaker.id]


def test_check_product(db, speaker):
    result = check_product(db, speaker.id, 2)
    assert result.message == "Product added to cart"
    assert result.product.name == "Speaker"
    assert result.quantity == 2


def test_check_product_requires_fields(db):
    with pytest.raises(ValidationError):
        check_product(db, None, 1)
    with pytest.raises(ValidationError):
        check_product(db, 1, 0)


def test_check_product_out_of_stock(db, catalog, speaker):
    catalog.update_product(speaker.id, ProductFields(in_stock=False))
    with pytest.raises(NotFound):
        check_product(db, speaker.id, 1)
    with pytest.raises(NotFound):
        check_product(db, 9999, 1)
