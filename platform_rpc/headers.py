"""
Header providers

A header provider supplies the static headers (application identity, device
identity) merged into every outbound RPC request.
"""

import abc
from typing import Dict, Mapping, Optional

from platform_rpc.config import AppIdentity


class HeaderProvider(abc.ABC):
    """Header provider interface"""

    @abc.abstractmethod
    def get_headers(self) -> Dict[str, str]:
        """Return the headers to merge into a request

        Returns:
            Dict: Fresh mapping of header names to values; callers may mutate it
        """
        pass


class StaticHeaderProvider(HeaderProvider):
    """Returns a fixed set of headers"""

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._headers = dict(headers or {})

    def get_headers(self) -> Dict[str, str]:
        return dict(self._headers)


class AppHeaderProvider(HeaderProvider):
    """Builds application identity headers from an ``AppIdentity``"""

    def __init__(self, identity: Optional[AppIdentity] = None):
        self.identity = identity or AppIdentity()

    def get_headers(self) -> Dict[str, str]:
        identity = self.identity
        headers = {
            "User-Agent": f"{identity.app_name}/{identity.app_version} ({identity.platform})",
            "Accept-Language": identity.language,
            "X-App-Version": identity.app_version,
        }
        if identity.device_id:
            headers["X-Device-Id"] = identity.device_id
        if identity.testnet:
            headers["X-Testnet"] = "true"
        return headers
