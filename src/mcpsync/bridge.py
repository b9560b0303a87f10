"""Direct calls to bridge tools.

Speaks the same wire contract as the generated plugin wrappers, so a tool
can be tried from the command line exactly as the plugin runtime calls it.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from .catalog.wrapper import build_request_body
from .errors import InvocationError
from .urls import tool_call_url

logger = logging.getLogger(__name__)


def call_tool(
    bridge_url: str,
    tool_name: str,
    data: Any,
    required: Sequence[str] = (),
    timeout_s: float = 120.0,
) -> Any:
    """POST data to the tool's call endpoint and return the parsed response.

    Raises:
        InvocationError: the bridge answered with a failure status
    """
    url = tool_call_url(bridge_url, tool_name)
    body = build_request_body(data, required)
    logger.debug("Calling %s with %r", url, body)

    response = requests.post(
        url,
        json=body,
        headers={"Content-Type": "application/json"},
        timeout=timeout_s,
    )
    if not response.ok:
        raise InvocationError(response.reason or str(response.status_code), response.status_code)
    return response.json()
