"""
Logo providers

The logo is decorative: a provider either returns image bytes or None, and
None is treated exactly like "no logo configured".
"""

import logging
from typing import Optional

import requests

from .config import LogoSpec

logger = logging.getLogger(__name__)


class LogoProvider:
    """Source of the letterhead logo"""

    def fetch(self) -> Optional[bytes]:
        raise NotImplementedError


class NoLogo(LogoProvider):
    def fetch(self) -> Optional[bytes]:
        return None


class StaticLogo(LogoProvider):
    """Logo bytes known up front, e.g. read from a local file"""

    def __init__(self, data: bytes):
        self.data = data

    def fetch(self) -> Optional[bytes]:
        return self.data


class RemoteLogo(LogoProvider):
    """Download the logo with a short timeout; any failure means no logo"""

    def __init__(self, url: str, timeout: float = 3.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self) -> Optional[bytes]:
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Could not fetch logo from %s: %s", self.url, e)
            return None
        return resp.content or None


def logo_provider_for(spec: LogoSpec) -> LogoProvider:
    if spec.url:
        return RemoteLogo(spec.url, timeout=spec.timeout)
    return NoLogo()
