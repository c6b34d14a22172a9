"""The two envelope constructors every tool handler returns through."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import CallToolResult, TextContent
from pydantic_core import to_jsonable_python

ERROR_PREFIX = "Error: "


def to_json_text(payload: Any) -> str:
    jsonable = to_jsonable_python(payload, by_alias=True, bytes_mode="base64", fallback=str)
    return json.dumps(jsonable, indent=2, ensure_ascii=False)


def format_success(payload: Any) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=to_json_text(payload))],
        isError=False,
    )


def format_failure(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"{ERROR_PREFIX}{message}")],
        isError=True,
    )
