"""
Message credit packs and purchases.

Members who met three or more different people on video this month get
reward pricing: the same price buys 50% more credits. The pack is sold
through a Stripe Checkout session and credited by the payments webhook.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.messaging.models import (
    CreditPack,
    MessageCreditPurchase,
    MessageCredits,
    PricingTier,
    PurchaseStatus,
)
from apps.payments import stripe_gateway
from apps.video.services import count_monthly_partners, REWARD_THRESHOLD

from .exceptions import InvalidCreditPackError
from .quota import get_credit_balance

logger = logging.getLogger(__name__)

MESSAGE_CREDITS_KIND = 'message_credits'


@dataclass(frozen=True)
class CreditPackPrice:
    pack: str
    standard_credits: int
    reward_credits: int
    price_cents: int

    def credits_for(self, pricing_tier: str) -> int:
        if pricing_tier == PricingTier.REWARD:
            return self.reward_credits
        return self.standard_credits


@dataclass
class CreditCheckout:
    purchase: MessageCreditPurchase
    url: str


CREDIT_PACKS = {
    CreditPack.SMALL: CreditPackPrice(CreditPack.SMALL, 20, 30, 199),
    CreditPack.MEDIUM: CreditPackPrice(CreditPack.MEDIUM, 50, 75, 399),
    CreditPack.LARGE: CreditPackPrice(CreditPack.LARGE, 120, 180, 799),
}


def get_pack(pack) -> CreditPackPrice:
    try:
        return CREDIT_PACKS[CreditPack(pack)]
    except ValueError:
        raise InvalidCreditPackError("Invalid pack")


def get_pricing_tier(*, user: User) -> str:
    if count_monthly_partners(user=user) >= REWARD_THRESHOLD:
        return PricingTier.REWARD
    return PricingTier.STANDARD


def serialize_pack(pack: CreditPackPrice, pricing_tier: str) -> dict:
    credits = pack.credits_for(pricing_tier)
    return {
        'id': pack.pack,
        'credits': credits,
        'priceCents': pack.price_cents,
        'perMessageCents': round(pack.price_cents / credits, 2),
    }


def get_credit_offer(*, user: User) -> dict:
    """Packs priced for ``user`` plus the current balance."""
    video_calls = count_monthly_partners(user=user)
    pricing_tier = PricingTier.REWARD if video_calls >= REWARD_THRESHOLD else PricingTier.STANDARD
    return {
        'packs': [serialize_pack(pack, pricing_tier) for pack in CREDIT_PACKS.values()],
        'pricingTier': pricing_tier,
        'hasActiveReward': pricing_tier == PricingTier.REWARD,
        'balance': get_credit_balance(user=user),
        'videoCallsThisMonth': video_calls,
    }


def start_credit_purchase(*, user: User, pack, redirect_url: Optional[str] = None) -> CreditCheckout:
    """
    Open a Stripe Checkout session for a credit pack.

    The credit amount is fixed when the session is created, so a member who
    qualifies for reward pricing keeps it even if the month rolls over
    before paying.

    Raises:
        InvalidCreditPackError: If ``pack`` is not a known pack
        stripe.StripeError: If Stripe rejects the request
    """
    pack_price = get_pack(pack)
    pricing_tier = get_pricing_tier(user=user)
    credits = pack_price.credits_for(pricing_tier)

    customer_id = stripe_gateway.ensure_customer(user)
    base_url = redirect_url or settings.APP_URL
    session = stripe_gateway.create_checkout_session(
        customer=customer_id,
        mode='payment',
        line_items=[{
            'price_data': {
                'currency': 'usd',
                'product_data': {'name': f'{credits} message credits'},
                'unit_amount': pack_price.price_cents,
            },
            'quantity': 1,
        }],
        metadata={
            'kind': MESSAGE_CREDITS_KIND,
            'user_id': str(user.id),
            'pack': pack_price.pack,
            'credits': str(credits),
        },
        client_reference_id=str(user.id),
        success_url=f'{base_url}/stripe?session_id={{CHECKOUT_SESSION_ID}}',
        cancel_url=f'{base_url}/buy-credits',
    )

    purchase = MessageCreditPurchase.objects.create(
        user=user,
        pack=pack_price.pack,
        credits=credits,
        amount_cents=pack_price.price_cents,
        pricing_tier=pricing_tier,
        stripe_session_id=session['id'],
    )

    logger.info(
        "Credit checkout created",
        extra={'user_id': str(user.id), 'pack': pack_price.pack, 'session_id': session['id']}
    )
    return CreditCheckout(purchase=purchase, url=session['url'])


@transaction.atomic
def add_credits(*, user_id, credits: int) -> int:
    """Add credits to a balance and return the new balance."""
    MessageCredits.objects.get_or_create(user_id=user_id)
    MessageCredits.objects.filter(user_id=user_id).update(
        credits_remaining=F('credits_remaining') + credits,
        total_purchased=F('total_purchased') + credits,
    )
    return MessageCredits.objects.get(user_id=user_id).credits_remaining


@transaction.atomic
def fulfill_credit_purchase(*, session_id: str, metadata: Optional[dict] = None) -> bool:
    """
    Credit a completed checkout session exactly once.

    Webhook retries hit the same session id; only the call that flips the
    purchase from pending to completed adds credits. Sessions without a
    purchase row (e.g. created before the row was stored) are recorded
    from the session metadata.

    Returns:
        True if credits were added by this call
    """
    purchase = (
        MessageCreditPurchase.objects
        .select_for_update()
        .filter(stripe_session_id=session_id)
        .first()
    )

    if purchase is None:
        metadata = metadata or {}
        pack_price = get_pack(metadata.get('pack'))
        purchase = MessageCreditPurchase.objects.create(
            user_id=metadata['user_id'],
            pack=pack_price.pack,
            credits=int(metadata.get('credits') or pack_price.standard_credits),
            amount_cents=pack_price.price_cents,
            stripe_session_id=session_id,
        )

    if purchase.status == PurchaseStatus.COMPLETED:
        logger.info("Credit purchase already fulfilled", extra={'session_id': session_id})
        return False

    updated = MessageCreditPurchase.objects.filter(
        pk=purchase.pk,
        status=PurchaseStatus.PENDING,
    ).update(status=PurchaseStatus.COMPLETED, credited_at=timezone.now())
    if not updated:
        return False

    balance = add_credits(user_id=purchase.user_id, credits=purchase.credits)
    logger.info(
        "Message credits added",
        extra={
            'user_id': str(purchase.user_id),
            'credits': purchase.credits,
            'balance': balance,
        }
    )
    return True
