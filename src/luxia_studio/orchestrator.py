"""
Generation Orchestrator.

This is the main entry point for running a generation service.
It validates a form state, builds the prompt, invokes the capability
registered for the service and tracks the outcome:

    IDLE -> VALIDATING -> SUBMITTING -> SUCCEEDED | FAILED

Every submission receives an invocation token. Progress reports and
outcomes from a superseded invocation are dropped, so the last
submission always wins.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import partial

from luxia_studio.capabilities import Capability, CapabilityRegistry
from luxia_studio.config import get_config
from luxia_studio.errors import GenerationError, ValidationError, to_generation_error
from luxia_studio.models.field_schema import FieldKind, ServiceDefinition
from luxia_studio.models.form_state import FileHandle, FormState, is_empty
from luxia_studio.models.generation_result import EMPTY_RESULTS, ResultSet
from luxia_studio.prompt_builder import build_service_prompt
from luxia_studio.tracing import traced_generation

logger = logging.getLogger("luxia-studio")

NUMBER_MINIMUM = 1


class GenerationStatus(str, Enum):
    """States of the generation state machine."""

    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationStatus.SUCCEEDED, GenerationStatus.FAILED)

    @property
    def is_busy(self) -> bool:
        return self in (GenerationStatus.VALIDATING, GenerationStatus.SUBMITTING)


@dataclass(frozen=True)
class OrchestratorSnapshot:
    """Observable state of the orchestrator at one point in time."""

    status: GenerationStatus = GenerationStatus.IDLE
    results: ResultSet = EMPTY_RESULTS
    error: GenerationError | None = None
    loading_message: str = ""
    invocation: int = 0
    prompt: str | None = field(default=None, compare=False)

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error else None


Listener = Callable[[OrchestratorSnapshot], None]


def validate_form(service: ServiceDefinition, state: FormState) -> ValidationError | None:
    """Return the first validation problem in the form state, if any."""
    for schema in service.fields:
        if schema.required and is_empty(state.get(schema.name)):
            return ValidationError(
                message=f'The field "{schema.name}" is required.',
                field_name=schema.name,
            )

    for schema in service.fields:
        if schema.kind is not FieldKind.NUMBER:
            continue
        value = state.get(schema.name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationError(
                message=f'The field "{schema.name}" must be a number.',
                field_name=schema.name,
            )
        if value < NUMBER_MINIMUM:
            return ValidationError(
                message=f'The field "{schema.name}" must be at least {NUMBER_MINIMUM}.',
                field_name=schema.name,
            )
        if schema.max is not None and value > schema.max:
            return ValidationError(
                message=f'The field "{schema.name}" must be at most {schema.max:g}.',
                field_name=schema.name,
            )
    return None


class ProgressSubscription:
    """
    Loading messages of one invocation, as an async iterator.

    Every progress report is delivered, repeats included. The iterator ends
    once the invocation succeeds, fails or is reset, and the subscription is
    dropped by the orchestrator at that point. Use it as an async context
    manager, or call aclose(), to unsubscribe earlier.
    """

    def __init__(self, subscriptions: list["ProgressSubscription"]):
        self._subscriptions = subscriptions
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False
        subscriptions.append(self)

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, message: str) -> None:
        if not self._closed:
            self._queue.put_nowait(message)

    def finish(self) -> None:
        """End the stream after the messages already queued."""
        self._unsubscribe()
        self._queue.put_nowait(None)

    async def aclose(self) -> None:
        """Unsubscribe now, whether or not iteration ever started."""
        self._closed = True
        self.finish()

    def _unsubscribe(self) -> None:
        if self in self._subscriptions:
            self._subscriptions.remove(self)

    def __aiter__(self) -> "ProgressSubscription":
        return self

    async def __anext__(self) -> str:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        message = await self._queue.get()
        if message is None:
            self._closed = True
            raise StopAsyncIteration
        return message

    async def __aenter__(self) -> "ProgressSubscription":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class GenerationOrchestrator:
    """
    Coordinates one generation service.

    Usage:
        orchestrator = GenerationOrchestrator(service, registry)

        store = FormStore(service)
        store.dispatch(FieldChanged("Style", "Cinematic"))

        snapshot = await orchestrator.submit(store.state)
        if snapshot.status is GenerationStatus.SUCCEEDED:
            for result in snapshot.results:
                print(result.download_name())
    """

    def __init__(
        self,
        service: ServiceDefinition,
        registry: CapabilityRegistry,
        preparing_message: str | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            service: The service whose form is submitted.
            registry: Capabilities by service kind.
            preparing_message: Loading message shown before the capability
                reports progress. If None, uses config.preparing_message.

        Raises:
            ConfigurationError: If no capability serves this service.
        """
        self.service = service
        self.preparing_message = preparing_message or get_config().preparing_message
        self._capability: Capability = registry.resolve(service.kind)
        self._invocation = 0
        self._snapshot = OrchestratorSnapshot()
        self._listeners: list[Listener] = []
        self._subscriptions: list[ProgressSubscription] = []

    @property
    def snapshot(self) -> OrchestratorSnapshot:
        return self._snapshot

    @property
    def status(self) -> GenerationStatus:
        return self._snapshot.status

    @property
    def results(self) -> ResultSet:
        return self._snapshot.results

    @property
    def error(self) -> GenerationError | None:
        return self._snapshot.error

    @property
    def loading_message(self) -> str:
        return self._snapshot.loading_message

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def progress_messages(self) -> ProgressSubscription:
        """
        Stream loading messages until the next terminal state.

        The subscription starts when this method is called, so call it
        before submitting to receive every message.
        """
        return ProgressSubscription(self._subscriptions)

    def validate(self, state: FormState) -> ValidationError | None:
        """Return the first validation problem in the form state, if any."""
        return validate_form(self.service, state)

    async def submit(self, state: FormState) -> OrchestratorSnapshot:
        """
        Run one generation attempt for the given form state.

        Prior results and errors are cleared before validation starts.
        Returns the snapshot after this attempt settles, or the current
        snapshot if a newer submission superseded it.
        """
        self._invocation += 1
        token = self._invocation
        self._set(
            OrchestratorSnapshot(status=GenerationStatus.VALIDATING, invocation=token)
        )

        problem = self.validate(state)
        if problem is not None:
            logger.info(f"Validation failed for {self.service.service_name}: {problem.message}")
            self._update(status=GenerationStatus.FAILED, error=problem)
            return self._snapshot

        prompt = build_service_prompt(self.service, state)
        self._update(
            status=GenerationStatus.SUBMITTING,
            loading_message=self.preparing_message,
            prompt=prompt,
        )
        self._publish(self.preparing_message)
        logger.info(f"Submitting {self.service.service_name} (invocation {token})")
        logger.debug(f"Prompt: {prompt!r}")

        try:
            with traced_generation(self.service.service_name, token):
                results = await self._capability(
                    prompt,
                    self._primary_input(state),
                    partial(self._report_progress, token),
                )
        except Exception as e:
            if not self._is_current(token):
                logger.debug(f"Ignoring failure of superseded invocation {token}: {e}")
                return self._snapshot
            logger.error(f"Generation failed for {self.service.service_name}: {e}")
            self._update(
                status=GenerationStatus.FAILED,
                results=EMPTY_RESULTS,
                error=to_generation_error(e),
                loading_message="",
            )
            return self._snapshot

        if not self._is_current(token):
            logger.debug(f"Ignoring results of superseded invocation {token}")
            return self._snapshot

        results = tuple(results)
        logger.info(f"{self.service.service_name} produced {len(results)} result(s)")
        self._update(
            status=GenerationStatus.SUCCEEDED,
            results=results,
            error=None,
            loading_message="",
        )
        return self._snapshot

    def reset(self) -> OrchestratorSnapshot:
        """Return to IDLE; an in-flight invocation becomes stale."""
        self._invocation += 1
        self._set(OrchestratorSnapshot(invocation=self._invocation))
        return self._snapshot

    def _primary_input(self, state: FormState) -> FileHandle | None:
        schema = self.service.primary_input_field
        if schema is None:
            return None
        value = state.get(schema.name)
        return value if isinstance(value, FileHandle) else None

    def _is_current(self, token: int) -> bool:
        return token == self._invocation

    def _report_progress(self, token: int, message: str) -> None:
        if not self._is_current(token) or self.status is not GenerationStatus.SUBMITTING:
            logger.debug(f"Dropping progress from invocation {token}: {message}")
            return
        self._update(loading_message=message)
        self._publish(message)

    def _publish(self, message: str) -> None:
        for subscription in list(self._subscriptions):
            subscription.publish(message)

    def _update(self, **changes) -> None:
        if changes.get("status", self.status).is_terminal:
            changes["loading_message"] = ""
        self._set(replace(self._snapshot, **changes))

    def _set(self, snapshot: OrchestratorSnapshot) -> None:
        previous = self._snapshot
        self._snapshot = snapshot

        settled = snapshot.status.is_terminal or snapshot.status is GenerationStatus.IDLE
        if settled and previous.status.is_busy:
            for subscription in list(self._subscriptions):
                subscription.finish()

        for listener in list(self._listeners):
            listener(snapshot)
