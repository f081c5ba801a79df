"""
GraphQL-backed MCP tools.

``register_graphql_tool`` turns a ``ToolDescriptor`` (operation, input
schema, optional output transform) into a FastMCP tool. Every call goes
through the same handler:

  1. validate the arguments and coerce them into GraphQL variables;
  2. run the query or mutation once through the SessionClient;
  3. GraphQL errors → error envelope carrying the errors list as JSON;
  4. otherwise apply the output transform, if any;
  5. any exception → error envelope ``{"success": false, "error": ...}``;
  6. success → envelope carrying the data as JSON.

The handler always returns a ``ToolEnvelope``. Only invalid arguments are
raised, as a ``ToolError``, so the protocol reports them like any other
bad invocation.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Literal, Mapping, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult
from graphql import DocumentNode, OperationDefinitionNode, OperationType
from mcp.types import TextContent, ToolAnnotations

from saffron_mcp.app.documents import Operation
from saffron_mcp.app.schema import NO_ARGUMENTS, InputSchema, Invalid
from saffron_mcp.app.session import SessionClient

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"

EnvelopeKind = Literal["data", "graphql_errors", "exception"]


@dataclass(frozen=True)
class ToolEnvelope:
    """
    Result of one tool call.

    Attributes:
        kind:    What produced the payload: operation data, GraphQL errors,
                 or an exception.
        payload: JSON text returned to the MCP client.
    """

    kind: EnvelopeKind
    payload: str

    @property
    def is_error(self) -> bool:
        return self.kind != "data"

    @classmethod
    def from_data(cls, data: Any) -> "ToolEnvelope":
        return cls("data", json.dumps(data, ensure_ascii=False))

    @classmethod
    def from_graphql_errors(cls, errors: list) -> "ToolEnvelope":
        return cls("graphql_errors", json.dumps(errors, ensure_ascii=False))

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolEnvelope":
        message = str(exc) or UNKNOWN_ERROR
        return cls(
            "exception",
            json.dumps({"success": False, "error": message}, ensure_ascii=False),
        )


@dataclass(frozen=True)
class ToolDescriptor:
    """Declarative definition of a GraphQL-backed tool."""

    name: str
    description: str
    operation: Operation
    input_schema: InputSchema = NO_ARGUMENTS
    transform_output: Optional[Callable[[Any], Any]] = None
    annotations: Optional[ToolAnnotations] = None


ToolHandler = Callable[[Mapping[str, Any]], Awaitable[ToolEnvelope]]


def is_mutation(document: DocumentNode) -> bool:
    """True if the document defines a mutation; anything else is run as a query."""
    for definition in document.definitions:
        if (
            isinstance(definition, OperationDefinitionNode)
            and definition.operation == OperationType.MUTATION
        ):
            return True
    return False


def make_handler(client: SessionClient, descriptor: ToolDescriptor) -> ToolHandler:
    """Build the per-call handler for a descriptor."""
    mutation = is_mutation(descriptor.operation.document)
    execute = client.mutate if mutation else client.query

    async def handler(arguments: Mapping[str, Any]) -> ToolEnvelope:
        try:
            outcome = descriptor.input_schema.validate(arguments or {})
            if isinstance(outcome, Invalid):
                raise ToolError(
                    f"Invalid arguments for tool {descriptor.name!r}: {outcome.message()}"
                )

            result = await execute(descriptor.operation, outcome.variables)

            if result.errors:
                logger.warning("Tool %s returned GraphQL errors", descriptor.name)
                return ToolEnvelope.from_graphql_errors(result.errors)

            data = result.data
            if descriptor.transform_output is not None:
                data = descriptor.transform_output(data)
            return ToolEnvelope.from_data(data)
        except ToolError:
            raise
        except Exception as exc:
            logger.warning("Tool %s failed: %s", descriptor.name, exc)
            return ToolEnvelope.from_exception(exc)

    return handler


class GraphQLTool(Tool):
    """FastMCP tool whose calls are served by an envelope-returning handler."""

    handler: Callable[..., Any]

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        envelope = await self.handler(arguments)
        if envelope.is_error:
            # FastMCP reports ToolError messages verbatim with isError set.
            raise ToolError(envelope.payload)
        return ToolResult(content=[TextContent(type="text", text=envelope.payload)])


def register_graphql_tool(
    server: FastMCP, client: SessionClient, descriptor: ToolDescriptor
) -> Tool:
    """Register a GraphQL-backed tool on the server and return it."""
    tool = GraphQLTool(
        name=descriptor.name,
        description=descriptor.description,
        parameters=descriptor.input_schema.json_schema(),
        annotations=descriptor.annotations,
        handler=make_handler(client, descriptor),
    )
    server.add_tool(tool)
    logger.debug(
        "Registered %s tool %s",
        "mutation" if is_mutation(descriptor.operation.document) else "query",
        descriptor.name,
    )
    return tool
