from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum

from hubspot_mcp.config import Settings
from hubspot_mcp.connectors.base import CRMConnector
from hubspot_mcp.connectors.hubspot_crm import HubSpotCRM
from hubspot_mcp.hubspot import HubSpotClient


class HandleState(str, Enum):
    UNCONFIGURED = "unconfigured"
    READY = "ready"


def _from_env() -> CRMConnector:
    return HubSpotCRM(HubSpotClient.from_settings(Settings.from_env()))


class ClientHandle:
    """Process-wide CRM connector, built on first use.

    Construction is deferred so a missing token fails the tool call that needed
    it rather than server start-up. A failed build leaves the handle
    UNCONFIGURED and the next call tries again; a successful one is kept for the
    life of the process so every call shares one rate-limit window.
    """

    def __init__(self, factory: Callable[[], CRMConnector] = _from_env):
        self._factory = factory
        self._crm: CRMConnector | None = None
        self._lock = threading.Lock()
        self.state = HandleState.UNCONFIGURED

    def get(self) -> CRMConnector:
        if self.state is HandleState.READY and self._crm is not None:
            return self._crm
        with self._lock:
            if self._crm is None:
                self._crm = self._factory()
                self.state = HandleState.READY
            return self._crm

    def reset(self) -> None:
        """Close and drop the built connector; the next get() builds a fresh one."""
        with self._lock:
            if self._crm is not None:
                self._crm.close()
            self._crm = None
            self.state = HandleState.UNCONFIGURED


default_handle = ClientHandle()
