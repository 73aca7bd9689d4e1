# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

from pathlib import Path

import pytest

from cuebridge.config import CueBridgeConfig, VetExitPolicy
from cuebridge.core.runtime import CommandRunner
from cuebridge.core.runtime.di import ServiceContainer, ServiceResolutionError, register_default_services
from cuebridge.messages import MessageCatalog
from cuebridge.service import CueCommandService


def test_register_and_resolve_singleton() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: object())
    first = container.resolve("value")
    second = container.resolve("value")
    assert first is second


def test_register_non_singleton() -> None:
    container = ServiceContainer()
    container.register("counter", lambda _: object(), singleton=False)
    first = container.resolve("counter")
    second = container.resolve("counter")
    assert first is not second


def test_replace_service() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: "a")
    assert container.resolve("value") == "a"
    container.register("value", lambda _: "b", replace=True)
    assert container.resolve("value") == "b"


def test_duplicate_registration_rejected() -> None:
    container = ServiceContainer()
    container.register("value", lambda _: "a")
    with pytest.raises(ValueError):
        container.register("value", lambda _: "b")


def test_service_missing() -> None:
    container = ServiceContainer()
    with pytest.raises(ServiceResolutionError):
        container.resolve("missing")


def test_register_default_services() -> None:
    container = ServiceContainer()
    config = CueBridgeConfig(
        executable_path=Path("/opt/cue"),
        timeout=9,
        vet_exit_policy=VetExitPolicy.ZERO_EXIT_ONLY,
    )
    register_default_services(container, config=config)

    runner = container.resolve("command_runner")
    service = container.resolve("cue_service")

    assert container.resolve("config") is config
    assert isinstance(container.resolve("message_catalog"), MessageCatalog)
    assert isinstance(runner, CommandRunner)
    assert runner.timeout == 9
    assert isinstance(service, CueCommandService)
    assert service.runner is runner
    assert service.vet_exit_policy is VetExitPolicy.ZERO_EXIT_ONLY
    assert "console_manager" not in container


def test_replacing_config_reconfigures_dependants() -> None:
    container = ServiceContainer()
    register_default_services(container)
    container.register("config", lambda _: CueBridgeConfig(timeout=1), replace=True)

    assert container.resolve("cue_service").runner.timeout == 1


def test_service_container_dunder_helpers() -> None:
    container = ServiceContainer()
    container.register("alpha", lambda _: "one")
    container.register("beta", lambda _: "two")

    assert len(container) == 2
    assert "alpha" in container
    assert "missing" not in container
    assert repr(container) == "ServiceContainer(keys=[alpha, beta])"
    assert container.provide("beta")() == "two"
