"""
Passwordless sign-in via emailed magic links.

Tokens are signed with Django's ``TimestampSigner`` so nothing has to be
stored server-side; the embedded timestamp bounds their lifetime. Each token
also carries a hash of the member's ``last_login``, which verification
updates, so a link stops working once it has been used.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core import signing
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import constant_time_compare, salted_hmac

from .exceptions import InvalidTokenError, UserNotFoundError
from .user_authentication import ensure_can_sign_in

User = get_user_model()

logger = logging.getLogger(__name__)

MAGIC_LINK_SALT = 'accounts.magic-link'


def _signer() -> signing.TimestampSigner:
    return signing.TimestampSigner(salt=MAGIC_LINK_SALT)


def _login_hash(user: User) -> str:
    last_login = user.last_login.isoformat() if user.last_login else ''
    return salted_hmac(MAGIC_LINK_SALT, f"{user.pk}:{last_login}").hexdigest()[:20]


def build_magic_link_token(user: User) -> str:
    return _signer().sign_object({'uid': str(user.id), 'login': _login_hash(user)})


def _send_magic_link_email(email: str, link: str) -> None:
    send_mail(
        subject='Your Rende-View sign-in link',
        message=f'Tap the link below to sign in. It expires in 15 minutes.\n\n{link}',
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[email],
    )


def request_magic_link(*, email: str) -> str:
    """
    Create a magic sign-in link and email it to the member.

    Args:
        email: Address of an existing, active account

    Returns:
        The signed token embedded in the link

    Raises:
        UserNotFoundError: If no active account uses this email
    """
    try:
        user = User.objects.get(email__iexact=email, is_active=True)
    except User.DoesNotExist:
        raise UserNotFoundError(f"No active user with email: {email}")

    token = build_magic_link_token(user)
    link = f"{settings.APP_URL}/auth/magic-link?token={token}"

    transaction.on_commit(lambda: _send_magic_link_email(user.email, link))
    logger.info('Magic link issued', extra={'user_id': str(user.id)})

    return token


@transaction.atomic
def verify_magic_link(*, token: str) -> User:
    """
    Exchange a magic-link token for the account it was issued to.

    Raises:
        InvalidTokenError: If the token is tampered with, expired or already used
        InactiveAccountError: If the account cannot sign in
    """
    try:
        payload = _signer().unsign_object(token, max_age=settings.MAGIC_LINK_MAX_AGE)
    except signing.SignatureExpired:
        raise InvalidTokenError("Sign-in link has expired")
    except signing.BadSignature:
        raise InvalidTokenError("Invalid sign-in link")

    try:
        user = User.objects.select_for_update().get(id=payload['uid'])
    except (User.DoesNotExist, KeyError, TypeError):
        raise InvalidTokenError("Invalid sign-in link")

    if not constant_time_compare(payload.get('login', ''), _login_hash(user)):
        logger.warning('Magic link reused', extra={'user_id': str(user.id)})
        raise InvalidTokenError("Sign-in link has already been used")

    ensure_can_sign_in(user)

    user.email_verified = True
    user.last_login = timezone.now()
    user.save(update_fields=['email_verified', 'last_login'])

    return user
