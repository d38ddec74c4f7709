from __future__ import annotations

import inspect
import json
import logging
from typing import Annotated, Any, Callable, Iterable, List, Set, Type

from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import TextContent
from pydantic import BaseModel, Field

from amplitude_mcp.core.client import AmplitudeClient
from amplitude_mcp.core.errors import AmplitudeClientError
from amplitude_mcp.core.operations import (
    OPERATIONS,
    Operation,
    OperationResult,
    run_operation,
)

log = logging.getLogger("amplitude_mcp.registry")


# --- Envelope -------------------------------------------------------------- #


def success_content(result: OperationResult) -> List[TextContent]:
    """Summary line followed by the pretty-printed JSON payload."""
    return [
        TextContent(type="text", text=result.summary),
        TextContent(type="text", text=json.dumps(result.payload, indent=2)),
    ]


def failure(operation: Operation, exc: AmplitudeClientError) -> ToolError:
    # FastMCP turns a raised ToolError into a result with isError set.
    return ToolError(f"{operation.error_label}: {exc.message}")


# --- Signatures ------------------------------------------------------------ #


def tool_parameters(model: Type[BaseModel]) -> List[inspect.Parameter]:
    """
    Keyword-only parameters mirroring the model's fields, so FastMCP publishes
    the same names, constraints and descriptions the model enforces.
    """
    params: List[inspect.Parameter] = []
    for name, field in model.model_fields.items():
        annotation = Annotated[
            (field.annotation, *field.metadata, Field(description=field.description))
        ]
        default = inspect.Parameter.empty if field.is_required() else field.default
        params.append(
            inspect.Parameter(
                field.alias or name,
                inspect.Parameter.KEYWORD_ONLY,
                annotation=annotation,
                default=default,
            )
        )
    return params


def _wrap_operation(
    operation: Operation, client_provider: Callable[[], AmplitudeClient]
) -> Callable:
    """Return a tool function that injects the client and applies the envelope."""

    async def wrapped(**kwargs: Any) -> List[TextContent]:
        client = client_provider()
        try:
            result = await run_operation(client, operation, kwargs)
        except AmplitudeClientError as exc:
            raise failure(operation, exc) from exc
        return success_content(result)

    wrapped.__name__ = operation.name
    wrapped.__qualname__ = operation.name
    wrapped.__doc__ = operation.description
    wrapped.__signature__ = inspect.Signature(  # type: ignore[attr-defined]
        parameters=tool_parameters(operation.params_model),
        return_annotation=List[TextContent],
    )
    return wrapped


# --- Registration ---------------------------------------------------------- #


def register_operations(
    app,
    client_provider: Callable[[], AmplitudeClient] | AmplitudeClient,
    operations: Iterable[Operation] | None = None,
) -> List[str]:
    """Register one tool per operation on an app that exposes a .tool decorator."""
    if isinstance(client_provider, AmplitudeClient):
        _client = client_provider

        def client_provider():
            return _client

    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    if operations is None:
        operations = OPERATIONS.values()
    seen_names: Set[str] = set()
    registered: List[str] = []

    for operation in operations:
        name = operation.name
        if name in seen_names:
            raise ValueError(f"Duplicate tool name detected: {name}")

        wrapped = _wrap_operation(operation, client_provider)
        app.tool(
            name=name, description=operation.description, structured_output=False
        )(wrapped)
        seen_names.add(name)
        registered.append(name)
        log.info("Registered tool: %s", name)

    return registered


__all__ = [
    "failure",
    "register_operations",
    "success_content",
    "tool_parameters",
]
