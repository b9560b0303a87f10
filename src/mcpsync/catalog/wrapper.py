"""Wrapper generation for bridge tools.

Each plugin carries a JavaScript function that the plugin runtime executes
to call its tool through the bridge. The text is a pure function of the
tool, its key and the bridge URL, so re-syncing an unchanged tool yields
the same code.
"""

from __future__ import annotations

import json
import re
from typing import Any, Sequence

from ..plugins.models import ToolDescriptor
from ..urls import tool_call_url

_NON_IDENT = re.compile(r"[^A-Za-z0-9_$]")

WRAPPER_TEMPLATE = """\
async function {func_name}(data) {{
    const url = {url};
    let body = data;
    if (typeof data === 'string') {{
        const requiredParams = {required};
        if (requiredParams.length > 0) {{
            body = {{
                [requiredParams[0]]: data
            }};
        }}
    }}
    const response = await globalThis.fetch(url, {{
        method: 'POST',
        headers: {{ 'Content-Type': 'application/json' }},
        body: JSON.stringify(body)
    }});
    if (!response.ok) throw new Error('Request failed: ' + response.statusText);
    return await response.json();
}}"""


def function_name(external_key: str) -> str:
    """Turn a plugin key into a valid JavaScript identifier."""
    name = _NON_IDENT.sub("_", external_key)
    if not name or name[0].isdigit():
        name = "_" + name
    return name


def build_wrapper(external_key: str, tool: ToolDescriptor, bridge_url: str) -> str:
    return WRAPPER_TEMPLATE.format(
        func_name=function_name(external_key),
        url=json.dumps(tool_call_url(bridge_url, tool.name)),
        required=json.dumps(tool.required),
    )


def build_request_body(data: Any, required: Sequence[str]) -> Any:
    """Apply the wrapper's body rule: a bare string goes under the first required param."""
    if isinstance(data, str) and required:
        return {required[0]: data}
    return data
