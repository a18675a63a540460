"""Async HTTP prober for keep-alive requests."""

from __future__ import annotations

import asyncio
import time
from typing import Optional
from urllib.parse import urljoin

import httpx

from keepalive.core.config import Settings
from keepalive.core.exceptions import (
    ConnectionError,
    MissingCredentialError,
    NetworkTimeoutError,
    ProbeError,
)
from keepalive.core.logging import get_logger
from keepalive.core.models import HTTPMethod, ProbeOutcome, Target

log = get_logger(__name__)


def describe_status(status_code: int) -> str:
    """Human-readable error for a non-2xx status, e.g. ``HTTP 503 Service Unavailable``."""
    try:
        phrase = httpx.codes(status_code).phrase
    except ValueError:
        phrase = ""
    return f"HTTP {status_code} {phrase}".rstrip()


class ProberEngine:
    """
    Concurrent keep-alive prober.

    Features:
    - One request per target, no retries
    - Unbounded fan-out over a shared HTTP client
    - Per-request timeout; a hanging target never delays the others
    - Every failure is captured as a ``ProbeOutcome``
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.transport = transport

    def build_client(self) -> httpx.AsyncClient:
        """Create the HTTP client shared by all probes of a run."""
        prober = self.settings.prober
        return httpx.AsyncClient(
            http2=prober.http2,
            timeout=httpx.Timeout(prober.timeout),
            follow_redirects=prober.follow_redirects,
            verify=prober.verify_ssl,
            transport=self.transport,
            headers={
                "User-Agent": prober.user_agent,
            },
        )

    def resolve_url(self, target: Target) -> str:
        """Resolve the target's endpoint against its base URL."""
        endpoint = target.endpoint
        if endpoint is None and target.is_authenticated:
            endpoint = self.settings.prober.default_endpoint
        if not endpoint:
            return target.url
        return urljoin(target.url, endpoint)

    @staticmethod
    def auth_headers(target: Target) -> dict[str, str]:
        if not target.apikey:
            return {}
        return {
            "apikey": target.apikey,
            "Authorization": f"Bearer {target.apikey}",
        }

    async def probe_all(self, targets: list[Target]) -> list[ProbeOutcome]:
        """
        Probe every target concurrently and wait for all of them.

        Args:
            targets: Targets in configuration order

        Returns:
            One outcome per target, in the same order
        """
        async with self.build_client() as client:
            results = await asyncio.gather(
                *(self.probe(target, client) for target in targets),
                return_exceptions=True,
            )

        outcomes: list[ProbeOutcome] = []
        for target, result in zip(targets, results):
            if isinstance(result, ProbeOutcome):
                outcomes.append(result)
            else:
                # Unanticipated failure inside a probe still counts as that target's outcome.
                log.error("probe_crashed", target=target.name, error=repr(result))
                outcomes.append(ProbeOutcome(
                    target=target.name,
                    success=False,
                    error=str(result) or type(result).__name__,
                ))
        return outcomes

    async def probe(
        self,
        target: Target,
        client: Optional[httpx.AsyncClient] = None,
    ) -> ProbeOutcome:
        """
        Probe a single target.

        ``probe_all`` passes the run's shared client; standalone calls
        open a short-lived client of their own.
        """
        if client is not None:
            return await self._probe_one(client, target)
        async with self.build_client() as client:
            return await self._probe_one(client, target)

    async def _probe_one(
        self,
        client: httpx.AsyncClient,
        target: Target,
    ) -> ProbeOutcome:
        """Issue the request and convert whatever happens into an outcome."""
        url = self.resolve_url(target)
        method = target.effective_method

        start_time = time.monotonic()
        try:
            if target.require_apikey and not target.apikey:
                raise MissingCredentialError()

            log.info("pinging", target=target.name, method=method.value, url=url)
            response = await self._send(client, method, url, target)

        except ProbeError as e:
            log.error("probe_failed", target=target.name, error=str(e))
            return ProbeOutcome(
                target=target.name,
                url=url,
                success=False,
                error=str(e),
                elapsed_ms=self._elapsed_ms(start_time),
            )

        elapsed = self._elapsed_ms(start_time)
        status = response.status_code

        if response.is_success:
            log.info("probe_ok", target=target.name, status=status, elapsed_ms=round(elapsed, 1))
            return ProbeOutcome(
                target=target.name,
                url=url,
                success=True,
                http_status=status,
                elapsed_ms=elapsed,
            )

        error = describe_status(status)
        log.error("probe_failed", target=target.name, status=status, error=error)
        return ProbeOutcome(
            target=target.name,
            url=url,
            success=False,
            http_status=status,
            error=error,
            elapsed_ms=elapsed,
        )

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: HTTPMethod,
        url: str,
        target: Target,
    ) -> httpx.Response:
        """Send one request, mapping transport failures onto probe errors."""
        try:
            return await client.request(
                method.value,
                url,
                headers=self.auth_headers(target),
            )
        except httpx.TimeoutException as e:
            raise NetworkTimeoutError() from e
        except httpx.HTTPError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        return (time.monotonic() - start_time) * 1000
