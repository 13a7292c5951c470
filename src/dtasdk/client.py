"""Sending side: sign outbound requests and hand them to a transport."""

from __future__ import annotations

import urllib.request
from typing import Any, Callable, Optional

from dtasdk.request import DEFAULT_USER_AGENT, USER_AGENT_HEADER, Request
from dtasdk.signer import Signer
from dtasdk.types import Credential, HeaderInput

Fetcher = Callable[[str, str, dict[str, str], Optional[str]], Any]


class InstantAccessClient:
    def __init__(
        self,
        credential: Credential,
        *,
        signer: Signer | None = None,
        fetcher: Fetcher | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.credential = credential
        self._signer = signer or Signer()
        self._fetcher = fetcher
        self._user_agent = user_agent

    def sign(
        self,
        *,
        url: str,
        method: str = "POST",
        headers: HeaderInput | None = None,
        body: str | None = None,
        content_type: str | None = None,
    ) -> Request:
        request = Request(url, method=method, content_type=content_type, body=body, headers=headers)
        if USER_AGENT_HEADER not in request.headers:
            request.headers[USER_AGENT_HEADER] = self._user_agent
        self._signer.sign(request, self.credential)
        return request

    def fetch(
        self,
        *,
        url: str,
        method: str = "POST",
        headers: HeaderInput | None = None,
        body: str | None = None,
        content_type: str | None = None,
    ) -> Any:
        signed = self.sign(url=url, method=method, headers=headers, body=body, content_type=content_type)
        signed_headers = dict(signed.headers.items())
        if self._fetcher is not None:
            return self._fetcher(signed.url, signed.method, signed_headers, signed.body)

        data = signed.body.encode("utf-8") if signed.body is not None else None
        outbound = urllib.request.Request(
            signed.url,
            method=signed.method,
            headers=signed_headers,
            data=data,
        )
        return urllib.request.urlopen(outbound)
