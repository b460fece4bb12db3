"""Stripe Checkout for memberships, call extensions and second dates."""

import logging
from typing import Optional

from django.conf import settings

from apps.accounts.models import User
from apps.accounts.tiers import EXTENSION_MINUTES, EXTENSION_PRICE_CENTS, SECOND_DATE_PRICE_CENTS, is_paid_tier
from apps.core.services import get_pricing
from apps.payments import stripe_gateway

from .exceptions import InvalidCheckoutError

logger = logging.getLogger(__name__)

KIND_SUBSCRIPTION = 'subscription'
KIND_EXTENSION = 'extension'
KIND_SECOND_DATE = 'second-date'
CHECKOUT_KINDS = (KIND_SUBSCRIPTION, KIND_EXTENSION, KIND_SECOND_DATE)


def build_line_item(*, kind: str, tier: Optional[str] = None, cents=None) -> dict:
    """
    Price a checkout from the admin pricing settings.

    Raises:
        InvalidCheckoutError: If the kind is unknown, the tier unpaid or the
            extension amount not one we sell
    """
    pricing = get_pricing()

    if kind == KIND_SUBSCRIPTION:
        tier_pricing = pricing.get('tiers', {}).get(tier or '')
        if not is_paid_tier(tier) or not tier_pricing:
            raise InvalidCheckoutError("Invalid tier")
        minutes = tier_pricing.get('minutes')
        amount = tier_pricing.get('price_cents')
        if not minutes or amount is None:
            raise InvalidCheckoutError("Invalid tier")
        return {
            'price_data': {
                'currency': 'usd',
                'product_data': {'name': f'Rende-View {tier} plan ({minutes} min)'},
                'recurring': {'interval': 'month'},
                'unit_amount': int(amount),
            },
            'quantity': 1,
        }

    if kind == KIND_EXTENSION:
        try:
            amount = int(cents)
        except (TypeError, ValueError):
            raise InvalidCheckoutError("Invalid extension amount")
        if amount != int(pricing.get('extension_cents') or EXTENSION_PRICE_CENTS):
            raise InvalidCheckoutError("Invalid extension amount")
        return {
            'price_data': {
                'currency': 'usd',
                'product_data': {'name': f'Call Extension ({EXTENSION_MINUTES} minutes)'},
                'unit_amount': amount,
            },
            'quantity': 1,
        }

    if kind == KIND_SECOND_DATE:
        return {
            'price_data': {
                'currency': 'usd',
                'product_data': {'name': 'Second Date Fee'},
                'unit_amount': int(pricing.get('second_date_cents') or SECOND_DATE_PRICE_CENTS),
            },
            'quantity': 1,
        }

    raise InvalidCheckoutError("Invalid kind")


def create_checkout(
    *,
    user: User,
    kind: str,
    tier: Optional[str] = None,
    cents=None,
    redirect_url: Optional[str] = None
) -> dict:
    """
    Open a Stripe Checkout session and return ``{url, id}``.

    Raises:
        InvalidCheckoutError: If the request cannot be priced
        stripe.StripeError: If Stripe rejects the request
    """
    tier = tier.strip().lower() if isinstance(tier, str) else tier
    line_item = build_line_item(kind=kind, tier=tier, cents=cents)

    customer_id = stripe_gateway.ensure_customer(user)
    success_url = redirect_url or settings.APP_URL

    session = stripe_gateway.create_checkout_session(
        customer=customer_id,
        line_items=[line_item],
        mode='subscription' if kind == KIND_SUBSCRIPTION else 'payment',
        success_url=success_url,
        cancel_url=success_url,
        metadata={
            'kind': kind,
            'tier': tier or '',
            'cents': '' if cents is None else str(cents),
            'user_id': str(user.id),
        },
        client_reference_id=str(user.id),
    )

    logger.info(
        "Checkout session created",
        extra={
            'user_id': str(user.id),
            'kind': kind,
            'tier': tier,
            'session_id': session['id'],
            'amount': line_item['price_data']['unit_amount'],
        }
    )
    return {'url': session['url'], 'id': session['id']}
