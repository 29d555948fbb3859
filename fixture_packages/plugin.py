"""Package manager plugin entrypoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .host import Host
from .logging import get_logger
from .service import FixturePackagesService

PRE_AUTOLOAD_DUMP = "pre-autoload-dump"


@dataclass
class Event:
    """Lifecycle event dispatched by the host package manager."""

    name: str
    host: Host
    dev_mode: bool = True


class Plugin:
    """Subscribes to the autoload dump and adopts fixture packages before it runs."""

    def __init__(self, service: FixturePackagesService | None = None) -> None:
        self._handled_events: Dict[str, bool] = {}
        self._service = service
        self.logger = get_logger("plugin")

    @staticmethod
    def subscribed_events() -> Dict[str, str]:
        return {PRE_AUTOLOAD_DUMP: "listen"}

    @property
    def service(self) -> FixturePackagesService:
        if self._service is None:
            self._service = FixturePackagesService()
        return self._service

    def activate(self, host: Host) -> None:
        self.logger.debug(">> Fixture package adopter plugin activated for %s.", host.base_dir)

    def deactivate(self, host: Host) -> None:
        self.logger.debug(">> Fixture package adopter plugin deactivated for %s.", host.base_dir)

    def uninstall(self, host: Host) -> None:
        self.logger.debug(">> Fixture package adopter plugin uninstalled for %s.", host.base_dir)

    def listen(self, event: Event) -> None:
        """Handle a subscribed event, at most once per event name."""
        if self._handled_events.get(event.name):
            return
        self._handled_events[event.name] = True

        if event.name == PRE_AUTOLOAD_DUMP:
            self.service.adopt(event.host, event.dev_mode)


__all__ = ["Event", "PRE_AUTOLOAD_DUMP", "Plugin"]
