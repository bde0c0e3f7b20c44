# stackfabric/types.py
"""Request carrier and hook signatures used by ServiceClient."""

from collections.abc import Callable, Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field


class RequestData(BaseModel):
    """Method, URL, query, body and headers of one request, reused across retry attempts."""

    method: str
    url: str
    params: Mapping[str, Any] | None = None
    json_data: Any | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def build_request(self, client: httpx.Client | None = None) -> httpx.Request:
        """Build the httpx.Request for the next attempt.

        With ``client``, its default headers (User-Agent, Accept) and timeout
        are merged in.
        """
        kwargs: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "params": self.params,
            "json": self.json_data,
            "headers": self.headers,
        }
        if client is not None:
            return client.build_request(**kwargs)
        return httpx.Request(**kwargs)


PreRequestHook = Callable[[str, str, dict[str, Any] | None, httpx.Headers], None]
"""Called as ``hook(method, url, params, headers)`` before each attempt.

``params`` and ``headers`` are mutable; changes made by the hook are sent.
Exceptions raised by a hook are logged and ignored.
"""

PostRequestHook = Callable[[httpx.Response, int], None]
"""Called as ``hook(response, attempts)`` once the response was accepted.

``attempts`` counts every attempt, including the retried ones.
"""
