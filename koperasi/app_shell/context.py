from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType

from koperasi.adapters.clock import SystemClock
from koperasi.adapters.http_client import HttpxApiClient
from koperasi.adapters.view_cache import InMemoryViewCache
from koperasi.app_shell.config import api_token
from koperasi.components.performa import PerformaReconciler
from koperasi.components.period import ClockPort
from koperasi.rules.models import ClientRules


@dataclass
class ClientContext:
    reconciler: PerformaReconciler
    http: HttpxApiClient
    cache: InMemoryViewCache
    clock: ClockPort
    rules: ClientRules

    @classmethod
    def create(
        cls,
        rules: ClientRules,
        *,
        clock: ClockPort | None = None,
        http: HttpxApiClient | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> ClientContext:
        clock = clock if clock is not None else SystemClock()
        if http is None:
            http = HttpxApiClient(
                rules.api.base_url,
                timeout_seconds=rules.api.timeout_seconds,
                token=api_token(rules, environ),
            )
        cache = InMemoryViewCache(ttl_seconds=rules.cache.dedupe_seconds, clock=clock)

        reconciler = PerformaReconciler(
            http,
            cadence=rules.performa.cadence,
            cache=cache,
            clock=clock,
            organizations_path=rules.api.organizations_path,
        )
        return cls(reconciler=reconciler, http=http, cache=cache, clock=clock, rules=rules)

    async def __aenter__(self) -> ClientContext:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.http.aclose()
