"""
Daily.co REST client.

API Reference: https://docs.daily.co/reference/rest-api
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings

from .exceptions import VideoNotConfiguredError, VideoProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyRoom:
    name: str
    url: str


class DailyClient:
    """
    Minimal Daily.co client: only room creation is needed.
    """

    timeout = 30

    def __init__(self, api_key: Optional[str] = None, domain: Optional[str] = None, api_url: Optional[str] = None):
        self.api_key = settings.DAILY_API_KEY if api_key is None else api_key
        self.domain = settings.DAILY_DOMAIN_NAME if domain is None else domain
        self._base_url = (api_url or settings.DAILY_API_URL).rstrip('/')
        self._headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def room_url(self, name: str) -> str:
        return f'https://{self.domain}.daily.co/{name}'

    def create_room(self, name: str, *, expires_in: int) -> DailyRoom:
        """
        Create a private room that expires ``expires_in`` seconds from now.

        Raises:
            VideoNotConfiguredError: If no API key is set
            VideoProviderError: If Daily.co is unreachable or rejects the request
        """
        if not self.is_configured():
            raise VideoNotConfiguredError("DAILY_API_KEY not configured")

        payload = {
            'name': name,
            'privacy': 'private',
            'properties': {
                'enable_screenshare': True,
                'exp': int(time.time()) + expires_in,
            },
        }

        try:
            resp = requests.post(
                f'{self._base_url}/rooms',
                json=payload,
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Daily.co request failed", extra={'room_name': name, 'error': str(e)})
            raise VideoProviderError("Failed to create Daily room") from e

        if resp.status_code >= 300:
            logger.error(
                "Daily.co rejected room creation",
                extra={'room_name': name, 'status_code': resp.status_code, 'body': resp.text[:500]}
            )
            raise VideoProviderError("Failed to create Daily room")

        data = resp.json()
        room_name = data.get('name') or name
        url = data.get('url')
        if not url:
            if not self.domain:
                raise VideoProviderError("Daily domain missing and API did not return url")
            url = self.room_url(room_name)

        return DailyRoom(name=room_name, url=url)
