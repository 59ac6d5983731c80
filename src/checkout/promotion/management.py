"""Promotion management — commands and handler for the admin surface."""

from protean import handle
from protean.fields import DateTime, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from checkout.domain import checkout
from checkout.errors import DuplicatePromotionCode
from checkout.promotion.promotion import UPDATABLE_FIELDS, DiscountType, Promotion, PromotionStatus


@checkout.command(part_of="Promotion")
class CreatePromotion:
    code = String(required=True, max_length=50)
    name = String(required=True, max_length=255)
    description = Text()
    discount_type = String(choices=DiscountType, required=True)
    discount_value = Float(required=True, min_value=0.0)
    min_order_amount = Float(default=0.0, min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    usage_limit = Integer(min_value=0)


@checkout.command(part_of="Promotion")
class UpdatePromotion:
    promotion_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    discount_type = String(choices=DiscountType)
    discount_value = Float(min_value=0.0)
    min_order_amount = Float(min_value=0.0)
    max_discount_amount = Float(min_value=0.0)
    start_date = DateTime()
    end_date = DateTime()
    usage_limit = Integer(min_value=0)
    status = String(choices=PromotionStatus)


@checkout.command(part_of="Promotion")
class DeactivatePromotion:
    promotion_id = Identifier(required=True)


@checkout.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        if repo.find_by_code(command.code) is not None:
            raise DuplicatePromotionCode(command.code.strip().upper())

        promotion = Promotion.create(
            code=command.code,
            name=command.name,
            description=command.description,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            min_order_amount=command.min_order_amount,
            max_discount_amount=command.max_discount_amount,
            start_date=command.start_date,
            end_date=command.end_date,
            usage_limit=command.usage_limit,
        )
        repo.add(promotion)
        return str(promotion.id)

    @handle(UpdatePromotion)
    def update_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)

        changes = {field: getattr(command, field) for field in UPDATABLE_FIELDS if getattr(command, field) is not None}
        promotion.update_terms(**changes)
        repo.add(promotion)

    @handle(DeactivatePromotion)
    def deactivate_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        promotion = repo.get(command.promotion_id)
        promotion.deactivate()
        repo.add(promotion)
