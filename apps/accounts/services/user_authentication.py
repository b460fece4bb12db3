"""Password sign-in and the account checks shared with magic links."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.accounts.models import AccountStatus

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)


def ensure_can_sign_in(user: User) -> None:
    """Raise InactiveAccountError for deactivated or banned accounts."""
    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")
    if user.account_status == AccountStatus.BANNED:
        logger.warning('Banned member attempted sign-in', extra={'user_id': str(user.id)})
        raise InactiveAccountError("Account has been suspended")


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    The row is locked while ``last_login`` is written. Unknown emails and
    wrong passwords raise the same error.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated or banned
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=email.strip())
        .first()
    )
    if user is None or not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    ensure_can_sign_in(user)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    logger.info('Member signed in', extra={'user_id': str(user.id), 'method': 'password'})

    return user
