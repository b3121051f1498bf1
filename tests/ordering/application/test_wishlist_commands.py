import pytest
from ordering.wishlist.management import RemoveFromWishlist, ToggleWishlistItem, wishlist_for
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _toggle(customer_id="user-001", product_id="5"):
    return current_domain.process(
        ToggleWishlistItem(customer_id=customer_id, product_id=product_id, title="Ring", price=9.99),
        asynchronous=False,
    )


class TestWishlistCommands:
    def test_wishlist_created_on_first_save(self):
        assert wishlist_for("user-001").items == []
        assert _toggle() is True
        assert [i.product_id for i in wishlist_for("user-001").items] == ["5"]

    def test_toggle_twice_unsaves(self):
        _toggle()
        assert _toggle() is False
        assert wishlist_for("user-001").items == []

    def test_wishlists_are_per_customer(self):
        _toggle(customer_id="user-001")
        assert wishlist_for("user-002").items == []

    def test_remove_returns_saved_item(self):
        _toggle()
        item = current_domain.process(RemoveFromWishlist(customer_id="user-001", product_id="5"), asynchronous=False)
        assert item == {"product_id": "5", "title": "Ring", "price": 9.99, "image": None, "category": None}

    def test_remove_unsaved_product(self):
        _toggle(product_id="6")
        with pytest.raises(ValidationError):
            current_domain.process(RemoveFromWishlist(customer_id="user-001", product_id="5"), asynchronous=False)

    def test_remove_without_wishlist(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveFromWishlist(customer_id="user-009", product_id="5"), asynchronous=False)
