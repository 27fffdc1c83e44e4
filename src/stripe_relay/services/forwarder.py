"""Deliver the forward envelope, re-POSTing across redirects.

Apps Script web apps answer a POST with 302 to a one-time googleusercontent
URL. Default client redirect handling turns that into a GET and drops the
body, so redirects are followed here by hand with method, body and headers
kept intact.
"""

import logging

import httpx

from stripe_relay.models.outcome import ForwardOutcome
from stripe_relay.models.payload import ForwardEnvelope

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})
MAX_REDIRECT_HOPS = 5
MAX_BODY_BYTES = 64 * 1024
EXHAUSTED_BODY_CHARS = 200


def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class RedirectPreservingForwarder:
    """POSTs JSON to a destination and follows redirects without downgrading to GET.

    Transport errors (``httpx.HTTPError``) propagate to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_hops: int = MAX_REDIRECT_HOPS,
        max_body_bytes: int = MAX_BODY_BYTES,
    ) -> None:
        self._client = client
        self._max_hops = max_hops
        self._max_body_bytes = max_body_bytes

    async def deliver(self, url: str, envelope: ForwardEnvelope) -> ForwardOutcome:
        body = envelope.to_json_bytes()
        headers = {"Content-Type": "application/json"}

        current_url = url
        hop_count = 0
        while True:
            status, location, text = await self._post(current_url, body, headers)

            if 200 <= status < 300:
                return ForwardOutcome(ok=True, status=status, final_url=current_url, body=text, hop_count=hop_count)

            if status not in REDIRECT_STATUSES or not location:
                return ForwardOutcome(ok=False, status=status, final_url=current_url, body=text, hop_count=hop_count)

            if hop_count >= self._max_hops:
                logger.warning(
                    "forward_redirects_exhausted",
                    extra={"hops": hop_count, "last_status": status, "url": current_url},
                )
                return ForwardOutcome(
                    ok=False,
                    status=0,
                    final_url=current_url,
                    body=(
                        f"Exceeded {self._max_hops} redirect hops; "
                        f"last response: {truncate(text, EXHAUSTED_BODY_CHARS)}"
                    ),
                    hop_count=hop_count,
                )

            next_url = str(httpx.URL(current_url).join(location))
            logger.info("forward_redirect", extra={"status": status, "hop": hop_count + 1, "location": next_url})
            current_url = next_url
            hop_count += 1

    async def _post(self, url: str, body: bytes, headers: dict[str, str]) -> tuple[int, str | None, str]:
        """One hop: POST without auto-redirects, return status, Location and body text."""
        async with self._client.stream(
            "POST", url, content=body, headers=headers, follow_redirects=False
        ) as response:
            text = await self._read_text(response)
            return response.status_code, response.headers.get("location"), text

    async def _read_text(self, response: httpx.Response) -> str:
        """Read at most ``max_body_bytes`` of the body. Read failures yield ""."""
        chunks: list[bytes] = []
        size = 0
        try:
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)
                size += len(chunk)
                if size >= self._max_body_bytes:
                    break
        except httpx.HTTPError as exc:
            logger.warning("forward_body_unreadable", extra={"status": response.status_code, "error": str(exc)})
            return ""
        raw = b"".join(chunks)[: self._max_body_bytes]
        return raw.decode(response.encoding or "utf-8", errors="replace")
