"""Promotion management — commands and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import PromotionNotFound
from ordering.promotion.promotion import Promotion


@ordering.command(part_of="Promotion")
class CreatePromotion:
    name = String(required=True, max_length=255, sanitize=False)
    description = Text(sanitize=False)
    discount_type = String(required=True, max_length=10)
    discount_value = Float(required=True, min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    product_ids = Text(required=True, sanitize=False)  # JSON array of product ids


@ordering.command(part_of="Promotion")
class DeactivatePromotion:
    promotion_id = Identifier(required=True)


@ordering.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        product_ids = json.loads(command.product_ids) if isinstance(command.product_ids, str) else command.product_ids
        promotion = Promotion.create(
            name=command.name,
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            start_date=command.start_date,
            end_date=command.end_date,
            product_ids=product_ids,
        )
        current_domain.repository_for(Promotion).add(promotion)
        return str(promotion.id)

    @handle(DeactivatePromotion)
    def deactivate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        try:
            promotion = repo.get(command.promotion_id)
        except ObjectNotFoundError:
            raise PromotionNotFound(str(command.promotion_id))
        promotion.deactivate()
        repo.add(promotion)
