"""MCP models — JSON-RPC 2.0 envelopes, tool definitions, and results.

Wire field names are camelCase; attributes are snake_case via aliases.
Use ``model_dump(by_alias=True)`` when producing wire payloads.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------

JSONRPC_VERSION = "2.0"

RequestId = int | str


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId
    method: str
    params: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method}
        if self.params is not None:
            data["params"] = self.params
        return data


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification (no ``id``, no reply body)."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            data["params"] = self.params
        return data


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcSuccess(BaseModel):
    """A response carrying ``result``."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    result: dict[str, Any]


class JsonRpcErrorResponse(BaseModel):
    """A response carrying ``error``."""

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    error: JsonRpcError


JsonRpcResponse = JsonRpcSuccess | JsonRpcErrorResponse


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class Tool(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    title: str | None = None
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}},
        alias="inputSchema",
    )
    output_schema: dict[str, Any] | None = Field(default=None, alias="outputSchema")
    annotations: dict[str, Any] | None = None


class ToolPage(BaseModel):
    """One page of a ``tools/list`` response."""

    model_config = ConfigDict(populate_by_name=True)

    tools: list[Tool] = []
    next_cursor: str | None = Field(default=None, alias="nextCursor")


# ---------------------------------------------------------------------------
# Content — multimodal parts of a tool result
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """Plain text content part."""

    type: Literal["text"] = "text"
    text: str
    annotations: dict[str, Any] | None = None


class ImageContent(BaseModel):
    """Base64-encoded image content part."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"] = "image"
    data: str
    mime_type: str = Field(alias="mimeType")
    annotations: dict[str, Any] | None = None


class AudioContent(BaseModel):
    """Base64-encoded audio content part."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["audio"] = "audio"
    data: str
    mime_type: str = Field(alias="mimeType")
    annotations: dict[str, Any] | None = None


class ResourceLink(BaseModel):
    """A link to a resource the client may fetch separately."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["resource_link"] = "resource_link"
    uri: str
    name: str = ""
    description: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    annotations: dict[str, Any] | None = None


class EmbeddedResource(BaseModel):
    """A resource embedded inline in the result."""

    type: Literal["resource"] = "resource"
    resource: dict[str, Any]
    annotations: dict[str, Any] | None = None


Content = Annotated[
    TextContent | ImageContent | AudioContent | ResourceLink | EmbeddedResource,
    Field(discriminator="type"),
]


class ToolCallResult(BaseModel):
    """The ``result`` payload of a ``tools/call`` response.

    ``content`` is in rendering order.  A response without ``content`` is
    read as an empty list.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: list[Content] = []
    is_error: bool = Field(default=False, alias="isError")
    structured_content: Any = Field(default=None, alias="structuredContent")

    @property
    def texts(self) -> list[str]:
        return [part.text for part in self.content if isinstance(part, TextContent)]


class InitializeResult(BaseModel):
    """The ``result`` payload of an ``initialize`` response."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    capabilities: dict[str, Any] = {}
    server_info: dict[str, Any] | None = Field(default=None, alias="serverInfo")
    instructions: str | None = None


# ---------------------------------------------------------------------------
# Function-calling shapes used by the schema bridge
# ---------------------------------------------------------------------------


class FunctionSchema(BaseModel):
    """A tool described in the generic function-calling convention."""

    name: str
    description: str
    parameters: dict[str, Any]

    def to_openai(self) -> dict[str, Any]:
        """Wrap as an OpenAI-compatible ``tools`` entry."""
        return {"type": "function", "function": self.model_dump()}


class FunctionCall(BaseModel):
    """A function call emitted by a model; ``arguments`` is a JSON string."""

    name: str
    arguments: str


class ToolCallArgs(BaseModel):
    """Name and decoded arguments ready for ``tools/call``."""

    name: str
    arguments: dict[str, Any] = {}


class StandardResult(BaseModel):
    """Flattened tool result.

    ``content`` is the human-readable channel, ``result`` the machine one.
    """

    success: bool
    result: Any = None
    error: str | None = None
    content: str | None = None


class ConnectionReport(BaseModel):
    """Outcome of probing an MCP server."""

    success: bool
    tool_count: int = 0
    tools: list[Tool] = []
    error: str | None = None
