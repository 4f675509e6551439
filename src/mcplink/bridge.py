"""Schema bridge — translations between MCP shapes and function calling.

Pure functions with no network dependency.
"""

from __future__ import annotations

import json

from mcplink.failures import MalformedArguments
from mcplink.models import FunctionCall, FunctionSchema, StandardResult, Tool, ToolCallArgs, ToolCallResult

DEFAULT_TOOL_ERROR = "Tool execution failed"


def tool_to_function_schema(tool: Tool) -> FunctionSchema:
    """Rename an MCP tool's fields to the function-calling convention.

    ``parameters`` is the tool's ``inputSchema``, unchanged.
    """
    return FunctionSchema(name=tool.name, description=tool.description, parameters=tool.input_schema)


def function_call_to_tool_args(call: FunctionCall) -> ToolCallArgs | MalformedArguments:
    """Decode a function call's JSON ``arguments`` string for ``tools/call``."""
    try:
        arguments = json.loads(call.arguments)
    except json.JSONDecodeError as exc:
        return MalformedArguments(tool_name=call.name, message=f"Invalid JSON: {exc}")
    if not isinstance(arguments, dict):
        return MalformedArguments(
            tool_name=call.name,
            message=f"Arguments must be a JSON object, got {type(arguments).__name__}",
        )
    return ToolCallArgs(name=call.name, arguments=arguments)


def tool_result_to_standard(result: ToolCallResult) -> StandardResult:
    """Flatten a tool result into success/error plus text and machine channels."""
    texts = result.texts
    if result.is_error:
        error = texts[0] if texts and texts[0] else DEFAULT_TOOL_ERROR
        return StandardResult(success=False, error=error)

    if result.structured_content is not None:
        machine = result.structured_content
    else:
        machine = [part.model_dump(by_alias=True, exclude_none=True) for part in result.content]
    return StandardResult(success=True, result=machine, content="\n".join(texts))
