"""
Scheduled downgrades.

A downgrade never takes effect immediately: the member keeps what they paid
for until the end of the billing period. Downgrading to free cancels the
subscription at period end; downgrading to a cheaper paid tier adds a
second phase to a subscription schedule. The webhook applies the new tier
when Stripe reports the change.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone as dt_timezone
from typing import Optional

from apps.accounts.models import User
from apps.accounts.tiers import MembershipTier, get_tier_limits, is_valid_tier, normalize_tier, tier_rank
from apps.core.services import get_pricing
from apps.payments import stripe_gateway
from apps.payments.stripe_gateway import get_field

from .exceptions import InvalidDowngradeError, NoActiveSubscriptionError, NoScheduledDowngradeError

logger = logging.getLogger(__name__)

SCHEDULED_TIER_KEY = 'scheduled_tier'


@dataclass
class DowngradeResult:
    scheduled_tier: str
    tier_change_at: Optional[datetime]
    message: str


def _period_bounds(subscription):
    """(start, end) epoch seconds of the current period."""
    start = get_field(subscription, 'current_period_start')
    end = get_field(subscription, 'current_period_end')
    if start is None or end is None:
        # Newer API versions keep the period on each item
        item = subscription['items']['data'][0]
        start = get_field(item, 'current_period_start', start)
        end = get_field(item, 'current_period_end', end)
    return start, end


def _format_date(value: Optional[datetime]) -> str:
    if value is None:
        return 'the end of your billing cycle'
    return f"{value:%B} {value.day}, {value.year}"


def _schedule_paid_downgrade(subscription, tier: str, user: User) -> None:
    tier_pricing = get_pricing().get('tiers', {}).get(tier) or {}
    amount = tier_pricing.get('price_cents')
    if not amount or not tier_pricing.get('minutes'):
        raise InvalidDowngradeError(f"Invalid tier configuration for {tier}")

    start, end = _period_bounds(subscription)
    items = subscription['items']['data']

    stripe_gateway.update_subscription(subscription['id'], metadata={SCHEDULED_TIER_KEY: tier})
    stripe_gateway.create_subscription_schedule(
        from_subscription=subscription['id'],
        end_behavior='release',
        phases=[
            {
                'items': [
                    {'price': item['price']['id'], 'quantity': get_field(item, 'quantity', 1)}
                    for item in items
                ],
                'start_date': start,
                'end_date': end,
            },
            {
                'items': [{
                    'price_data': {
                        'currency': 'usd',
                        'product': items[0]['price']['product'],
                        'recurring': {'interval': 'month'},
                        'unit_amount': int(amount),
                    },
                    'quantity': 1,
                }],
                'start_date': end,
                'metadata': {'tier': tier},
            },
        ],
        metadata={SCHEDULED_TIER_KEY: tier, 'user_id': str(user.id)},
    )


def schedule_downgrade(*, user: User, tier) -> DowngradeResult:
    """
    Schedule a move to a lower tier at the end of the billing period.

    Raises:
        InvalidDowngradeError: If the tier is missing, unknown or not lower
        NoActiveSubscriptionError: If the member has no active subscription
        stripe.StripeError: If Stripe rejects a request
    """
    if not tier:
        raise InvalidDowngradeError("Tier is required")

    target = str(tier).strip().lower()
    if not is_valid_tier(target):
        raise InvalidDowngradeError("Invalid tier")

    current = normalize_tier(user.membership_tier)
    if tier_rank(target) >= tier_rank(current):
        raise InvalidDowngradeError("Can only downgrade to a lower tier")

    if not user.stripe_customer_id:
        raise NoActiveSubscriptionError(
            "No active subscription found. Please upgrade through the subscription page instead."
        )

    subscriptions = stripe_gateway.list_active_subscriptions(user.stripe_customer_id)
    if not subscriptions:
        raise NoActiveSubscriptionError(
            "No active subscription found. Please upgrade through the subscription page instead."
        )

    period_end = None
    for subscription in subscriptions:
        _start, end = _period_bounds(subscription)
        if end is not None:
            period_end = datetime.fromtimestamp(end, tz=dt_timezone.utc)

        if target == MembershipTier.FREE:
            stripe_gateway.update_subscription(
                subscription['id'],
                cancel_at_period_end=True,
                metadata={SCHEDULED_TIER_KEY: MembershipTier.FREE.value},
            )
        else:
            _schedule_paid_downgrade(subscription, target, user)

    user.scheduled_tier = target
    user.tier_change_at = period_end
    user.save(update_fields=['scheduled_tier', 'tier_change_at'])

    logger.info(
        "Downgrade scheduled",
        extra={
            'user_id': str(user.id),
            'from_tier': current,
            'to_tier': target,
            'effective_date': period_end.isoformat() if period_end else None,
        }
    )

    current_name = get_tier_limits(current).name
    return DowngradeResult(
        scheduled_tier=target,
        tier_change_at=period_end,
        message=(
            f"Your downgrade is scheduled. You retain your current {current_name} "
            f"benefits until {_format_date(period_end)}."
        ),
    )


def cancel_downgrade(*, user: User) -> None:
    """
    Undo a scheduled downgrade.

    Raises:
        NoScheduledDowngradeError: If nothing is scheduled
        stripe.StripeError: If Stripe rejects a request
    """
    if not user.scheduled_tier:
        raise NoScheduledDowngradeError("No scheduled downgrade to cancel")

    if user.stripe_customer_id:
        for subscription in stripe_gateway.list_active_subscriptions(user.stripe_customer_id):
            metadata = get_field(subscription, 'metadata', {})
            if get_field(subscription, 'cancel_at_period_end', False):
                stripe_gateway.update_subscription(
                    subscription['id'],
                    cancel_at_period_end=False,
                    metadata={SCHEDULED_TIER_KEY: ''},
                )
            elif get_field(metadata, SCHEDULED_TIER_KEY):
                stripe_gateway.update_subscription(subscription['id'], metadata={SCHEDULED_TIER_KEY: ''})

        for schedule in stripe_gateway.list_subscription_schedules(user.stripe_customer_id):
            schedule_metadata = get_field(schedule, 'metadata', {})
            if get_field(schedule, 'status') == 'active' and get_field(schedule_metadata, SCHEDULED_TIER_KEY):
                stripe_gateway.release_subscription_schedule(schedule['id'])

    previous = user.scheduled_tier
    user.scheduled_tier = None
    user.tier_change_at = None
    user.save(update_fields=['scheduled_tier', 'tier_change_at'])

    logger.info(
        "Scheduled downgrade cancelled",
        extra={'user_id': str(user.id), 'previous_scheduled_tier': previous}
    )
