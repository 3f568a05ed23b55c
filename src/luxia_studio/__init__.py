"""
LUXIA Studio: schema-driven media generation.

Describe a service's input fields, collect values, turn them into a
single prompt and run an image or video generation capability.

Simple Usage:
    from luxia_studio import (
        FieldChanged, FormStore, GenerationOrchestrator, find_service,
    )
    from luxia_studio.providers import build_gemini_registry

    service = find_service("Générateur d'Image Photoshop")
    store = FormStore(service)
    store.dispatch(FieldChanged("Style", "Cinematic"))
    store.dispatch(FieldChanged("Champ de description", "a sunset"))

    orchestrator = GenerationOrchestrator(service, build_gemini_registry())
    snapshot = await orchestrator.submit(store.state)

Progress:
    messages = orchestrator.progress_messages()
    # consume `async for message in messages` while submit() runs,
    # or `async with orchestrator.progress_messages() as messages:`

Tracing:
    from luxia_studio.tracing import setup_tracing

    setup_tracing(console=True, verbose=True)
"""

from luxia_studio.orchestrator import (
    GenerationOrchestrator,
    GenerationStatus,
    OrchestratorSnapshot,
    ProgressSubscription,
    validate_form,
)
from luxia_studio.capabilities import (
    Capability,
    CapabilityRegistry,
    ProgressCallback,
)
from luxia_studio.catalog import (
    BUILTIN_SERVICES,
    check_registry,
    find_service,
    get_catalog,
    load_catalog,
)
from luxia_studio.errors import (
    ConfigurationError,
    GenerationError,
    ProviderError,
    UnknownError,
    ValidationError,
)
from luxia_studio.models import (
    FieldChanged,
    FieldKind,
    FieldRole,
    FieldSchema,
    FileHandle,
    FormState,
    FormStore,
    GenerationResult,
    MediaKind,
    OptionToggled,
    ServiceDefinition,
    ServiceKind,
    download_name,
    initialize,
    set_field,
)
from luxia_studio.prompt_builder import build_prompt, build_service_prompt
from luxia_studio.tracing import (
    disable_tracing,
    enable_tracing,
    setup_tracing,
)

__all__ = [
    # Main interface
    "GenerationOrchestrator",
    "GenerationStatus",
    "OrchestratorSnapshot",
    "ProgressSubscription",
    "validate_form",
    # Capabilities
    "Capability",
    "CapabilityRegistry",
    "ProgressCallback",
    # Catalog
    "BUILTIN_SERVICES",
    "check_registry",
    "find_service",
    "get_catalog",
    "load_catalog",
    # Errors
    "ConfigurationError",
    "GenerationError",
    "ProviderError",
    "UnknownError",
    "ValidationError",
    # Schemas and form state
    "FieldChanged",
    "FieldKind",
    "FieldRole",
    "FieldSchema",
    "FileHandle",
    "FormState",
    "FormStore",
    "OptionToggled",
    "ServiceDefinition",
    "ServiceKind",
    "initialize",
    "set_field",
    # Results
    "GenerationResult",
    "MediaKind",
    "download_name",
    # Prompt
    "build_prompt",
    "build_service_prompt",
    # Tracing
    "setup_tracing",
    "disable_tracing",
    "enable_tracing",
]

__version__ = "0.1.0"
