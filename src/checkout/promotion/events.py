"""Domain events for the Promotion aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Promotion")
class PromotionCreated:
    """A new coupon definition was created."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
    discount_type = String(required=True)
    discount_value = Float(required=True)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    usage_limit = Integer()


@checkout.event(part_of="Promotion")
class PromotionUpdated:
    """Terms of a promotion were changed by an admin."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)


@checkout.event(part_of="Promotion")
class PromotionRedeemed:
    """A promotion was applied to an order; its usage counter moved by one."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
    order_id = Identifier()
    used_count = Integer(required=True)
    redeemed_at = DateTime(required=True)


@checkout.event(part_of="Promotion")
class PromotionDeactivated:
    """A promotion was switched off and can no longer be redeemed."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True)
