# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Minimal dependency injection container used to wire cuebridge services."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from ...config import CueBridgeConfig
from ...messages import MessageCatalog, default_catalog
from ...service import CueCommandService
from .runner import CommandRunner

ServiceFactory = Callable[["ServiceContainer"], Any]


class ServiceResolutionError(KeyError):
    """Raise when a requested service has not been registered."""


@dataclass(frozen=True)
class _ServiceRecord:
    """Store metadata about a registered service factory."""

    factory: ServiceFactory
    singleton: bool


class ServiceContainer:
    """Provide a lightweight registry for service factories."""

    def __init__(self) -> None:
        self._factories: dict[str, _ServiceRecord] = {}
        self._singletons: dict[str, Any] = {}

    def register(
        self,
        key: str,
        factory: ServiceFactory,
        *,
        singleton: bool = True,
        replace: bool = False,
    ) -> None:
        """Register ``factory`` under ``key``.

        Args:
            key: Unique service identifier used during lookups.
            factory: Callable receiving the container and returning the service instance.
            singleton: When ``True`` the service is cached after the first resolution.
            replace: When ``True`` replace an existing registration for ``key``.

        Raises:
            ValueError: If a service is already registered and ``replace`` is ``False``.
        """

        if not replace and key in self._factories:
            raise ValueError(f"service '{key}' already registered")
        self._factories[key] = _ServiceRecord(factory=factory, singleton=singleton)
        self._singletons.pop(key, None)

    def resolve(self, key: str) -> Any:
        """Resolve the service registered under ``key``.

        Raises:
            ServiceResolutionError: If no factory is registered for ``key``.
        """

        record = self._factories.get(key)
        if record is None:
            raise ServiceResolutionError(key)
        if record.singleton:
            if key not in self._singletons:
                self._singletons[key] = record.factory(self)
            return self._singletons[key]
        return record.factory(self)

    def provide(self, key: str) -> Callable[[], Any]:
        """Return a zero-argument provider that resolves ``key`` lazily."""

        return partial(self.resolve, key)

    def __contains__(self, key: str) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        keys = ", ".join(sorted(self._factories))
        return f"ServiceContainer(keys=[{keys}])"


def register_default_services(
    container: ServiceContainer,
    *,
    config: CueBridgeConfig | None = None,
    catalog: MessageCatalog | None = None,
) -> None:
    """Register the standard cuebridge services on ``container``.

    Registered keys: ``config``, ``message_catalog``, ``command_runner`` and
    ``cue_service``. The runner and service are derived from whatever ``config``
    resolves to, so replacing ``config`` before the first resolution reconfigures both.
    """

    active_config = config or CueBridgeConfig()
    container.register("config", lambda _: active_config)
    container.register("message_catalog", lambda _: catalog or default_catalog())
    container.register("command_runner", lambda c: CommandRunner.from_config(c.resolve("config")))
    container.register(
        "cue_service",
        lambda c: CueCommandService(
            runner=c.resolve("command_runner"),
            vet_exit_policy=c.resolve("config").vet_exit_policy,
        ),
    )


__all__ = ["ServiceContainer", "ServiceResolutionError", "register_default_services"]
