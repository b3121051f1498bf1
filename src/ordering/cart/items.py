"""Cart item management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=100)
    quantity = Integer(min_value=1, default=1)


@ordering.command(part_of="ShoppingCart")
class IncrementCartItem:
    cart_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)


@ordering.command(part_of="ShoppingCart")
class DecrementCartItem:
    cart_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.add_item(
            product_id=command.product_id,
            title=command.title,
            price=command.price,
            quantity=command.quantity or 1,
            image=command.image,
            category=command.category,
        )
        repo.add(cart)
        return cart.item_count

    @handle(IncrementCartItem)
    def increment(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.increment(command.product_id)
        repo.add(cart)
        return cart.item_count

    @handle(DecrementCartItem)
    def decrement(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.decrement(command.product_id)
        repo.add(cart)
        return cart.item_count

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(command.product_id)
        repo.add(cart)
        return cart.item_count

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)
        return cart.item_count
