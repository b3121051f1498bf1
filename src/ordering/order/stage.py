"""Admin stage transitions — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order


@ordering.command(part_of="Order")
class ChangeOrderStage:
    order_id = Identifier(required=True)
    stage = String(required=True, max_length=30)
    note = String(max_length=500)
    changed_by = String(max_length=50, default="admin")


@ordering.command_handler(part_of=Order)
class ChangeOrderStageHandler:
    @handle(ChangeOrderStage)
    def change_stage(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.stage
        order.change_stage(command.stage, note=command.note, changed_by=command.changed_by)
        repo.add(order)
        logger.info("order.stage_changed", order_id=command.order_id, previous_stage=previous, stage=order.stage)
        return order.stage
