"""
MCP Tool definitions for LUXIA Studio.

Exposes the service catalog and the generation workflow as MCP tools.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from luxia_studio.capabilities import CapabilityRegistry
from luxia_studio.catalog import find_service, get_catalog
from luxia_studio.mcp_server.session_store import get_session_api_key
from luxia_studio.models.field_schema import FieldKind, ServiceDefinition
from luxia_studio.models.form_state import FieldChanged, FileHandle, FormStore
from luxia_studio.orchestrator import (
    GenerationOrchestrator,
    GenerationStatus,
    OrchestratorSnapshot,
    ProgressSubscription,
    validate_form,
)
from luxia_studio.providers.gemini import build_gemini_registry

if TYPE_CHECKING:
    from mcp.server.session import ServerSession

logger = logging.getLogger("luxia-studio-mcp")


async def mcp_list_services() -> dict[str, Any]:
    """List the catalog services with their field schemas."""
    return {"services": [service.to_form_config() for service in get_catalog()]}


def _form_store_from_values(service: ServiceDefinition, values: dict[str, Any]) -> FormStore:
    """Fill a fresh form store; upload fields take file paths."""
    store = FormStore(service)
    for name, value in values.items():
        schema = service.field(name)
        if schema.kind is FieldKind.UPLOAD and value:
            value = FileHandle.from_path(value)
        store.dispatch(FieldChanged(name, value))
    return store


async def mcp_generate_media(
    service_name: str,
    values: dict[str, Any] | None = None,
    gemini_api_key: str | None = None,
    session: "ServerSession | None" = None,
    registry: CapabilityRegistry | None = None,
    session_id: str | None = None,
) -> dict[str, Any]:
    """
    MCP-compatible wrapper around one generation attempt.

    Args:
        service_name: Name of a catalog service.
        values: Field values keyed by field name. Upload fields take a
            local file path; checkbox groups take a list of options.
        gemini_api_key: Optional key; falls back to the key the caller's
            SSE session sent, then to GEMINI_API_KEY.
        session: MCP session used to forward progress notifications.
        registry: Capabilities to use instead of the Gemini ones.
        session_id: SSE session of the caller, if any.

    Returns:
        Dictionary with the final status, the prompt, the results (with
        download names) or the error.
    """
    service = find_service(service_name)
    store = _form_store_from_values(service, values or {})

    # Report form problems before any provider setup
    problem = validate_form(service, store.state)
    if problem is not None:
        logger.info(f"[{service_name}] {problem.message}")
        return _snapshot_output(
            service_name,
            OrchestratorSnapshot(status=GenerationStatus.FAILED, error=problem),
        )

    if registry is None:
        registry = build_gemini_registry(api_key=gemini_api_key or get_session_api_key(session_id))
    orchestrator = GenerationOrchestrator(service, registry)

    async def forward_progress(messages: ProgressSubscription) -> None:
        async for message in messages:
            logger.info(f"[{service_name}] {message}")
            if session is None:
                continue
            try:
                await session.send_log_message(
                    level="info",
                    data={"type": "progress", "service": service_name, "message": message},
                    logger="luxia-studio-progress",
                )
            except Exception as e:
                logger.debug(f"Could not send progress notification: {e}")

    async with orchestrator.progress_messages() as messages:
        forwarder = asyncio.create_task(forward_progress(messages))
        try:
            snapshot = await orchestrator.submit(store.state)
            await forwarder
        finally:
            forwarder.cancel()

    return _snapshot_output(service_name, snapshot)


def _snapshot_output(service_name: str, snapshot: OrchestratorSnapshot) -> dict[str, Any]:
    output: dict[str, Any] = {
        "service": service_name,
        "status": snapshot.status.value,
        "prompt": snapshot.prompt,
    }
    if snapshot.error is not None:
        output["error"] = {"kind": snapshot.error.kind, "message": snapshot.error.message}
    else:
        output["results"] = [
            {
                "kind": result.kind.value,
                "mime_type": result.mime_type,
                "download_name": result.download_name(),
                "url": result.url,
            }
            for result in snapshot.results
        ]
    return output


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "list_services",
            "description": """
List the LUXIA Studio generation services.

Each service comes with its ordered fields: name, kind (upload, dropdown,
checkboxGroup, textarea, number), whether it is required, its options,
default value and bounds. Call this before generate_media to know which
values a service accepts.
""".strip(),
            "inputSchema": {
                "type": "object",
                "properties": {},
            },
        },
        {
            "name": "generate_media",
            "description": """
Generate images or a video with a LUXIA Studio service.

HOW TO USE:
- service_name must be one of the names returned by list_services
- values maps field names to values
- upload fields take an absolute local file path
- checkboxGroup fields take a list of options
- Required fields must be provided, otherwise the call fails with a
  validation error naming the field

The tool returns the final status, the prompt that was sent and, on
success, the results as data URLs with a suggested download name.
Video generation can take several minutes; progress is reported through
log notifications.
""".strip(),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "service_name": {
                        "type": "string",
                        "description": "Name of the service to run",
                    },
                    "values": {
                        "type": "object",
                        "description": "Field values keyed by field name",
                        "additionalProperties": True,
                    },
                    "gemini_api_key": {
                        "type": "string",
                        "description": "Gemini API key. If not provided, the server key is used.",
                    },
                },
                "required": ["service_name"],
            },
        },
    ]
