"""Cart to order conversion — command and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class CheckOutCart:
    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ConvertCartHandler:
    @handle(CheckOutCart)
    def check_out(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.check_out(order_id=command.order_id)
        repo.add(cart)
