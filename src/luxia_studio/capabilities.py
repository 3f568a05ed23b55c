"""
Generation capability contract.

A capability is the asynchronous operation that actually produces
media. The core treats it as a black box and selects it from a closed
registry keyed by ServiceKind.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Awaitable, Protocol

from luxia_studio.errors import ConfigurationError
from luxia_studio.models.field_schema import ServiceKind
from luxia_studio.models.form_state import FileHandle
from luxia_studio.models.generation_result import GenerationResult

ProgressCallback = Callable[[str], None]


class Capability(Protocol):
    """Callable that turns a prompt (and optional file) into results."""

    def __call__(
        self,
        prompt: str,
        file_input: FileHandle | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Awaitable[Sequence[GenerationResult]]: ...


class CapabilityRegistry:
    """
    Closed mapping from ServiceKind to the capability serving it.

    Usage:
        registry = CapabilityRegistry({ServiceKind.VEO_VIDEO: provider.generate_video})
        capability = registry.resolve(ServiceKind.VEO_VIDEO)
    """

    def __init__(self, capabilities: Mapping[ServiceKind, Capability] | None = None):
        self._capabilities: dict[ServiceKind, Capability] = {}
        for kind, capability in (capabilities or {}).items():
            self.register(kind, capability)

    def register(self, kind: ServiceKind, capability: Capability) -> None:
        self._capabilities[ServiceKind(kind)] = capability

    def supports(self, kind: ServiceKind) -> bool:
        return kind in self._capabilities

    def missing(self) -> list[ServiceKind]:
        """Known services with no capability registered."""
        return [kind for kind in ServiceKind if kind not in self._capabilities]

    def resolve(self, kind: ServiceKind) -> Capability:
        try:
            return self._capabilities[kind]
        except KeyError:
            raise ConfigurationError(
                f'No generation capability registered for "{kind.value}"',
                service_name=kind.value,
            ) from None
