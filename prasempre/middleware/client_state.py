"""
Client-side state binding
Backs the daily counter store with the visitor's own cookie jar
"""

import base64
import binascii
import logging
from typing import Dict, Mapping, Optional

from fastapi import Request, Response

logger = logging.getLogger(__name__)

COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def _encode(value: str) -> str:
    # no padding, so the cookie value never needs quoting
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")


def _decode(value: str) -> Optional[str]:
    try:
        padded = value + "=" * (-len(value) % 4)
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


class CookieKeyValueStore:
    """
    KeyValueStore over request/response cookies

    Values are base64url encoded so JSON survives cookie quoting. Writes are
    visible to later reads within the same request.
    """

    def __init__(self, cookies: Mapping[str, str], response: Response, max_age: int = COOKIE_MAX_AGE):
        self.response = response
        self.max_age = max_age
        self._values: Dict[str, str] = {}
        for key, raw in cookies.items():
            if key.startswith("prasempre_"):
                decoded = _decode(raw)
                if decoded is None:
                    logger.warning(f"Ignoring undecodable client cookie {key}")
                    continue
                self._values[key] = decoded

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self.response.set_cookie(
            key,
            _encode(value),
            max_age=self.max_age,
            httponly=True,
            samesite="lax",
        )


async def get_client_store(request: Request, response: Response) -> CookieKeyValueStore:
    """Dependency: the visitor's per-browser key/value store"""
    return CookieKeyValueStore(request.cookies, response)
