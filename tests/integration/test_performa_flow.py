"""
End-to-end performa flow through the real HTTP adapter against an in-memory
backend served by httpx.MockTransport.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from koperasi.adapters.http_client import HttpxApiClient
from koperasi.app_shell.context import ClientContext
from koperasi.components.performa import MissingParentError, PerformaIndicators
from koperasi.components.progress import ProgressReport
from koperasi.components.survey import (
    HubunganLembaga,
    PerformaBisnis,
    PerformaOrganisasi,
    RencanaStrategis,
)

PREFIX = "/api/koperasi/"


class FakeBackend:
    """Minimal performa backend keyed by (org, periode)."""

    def __init__(self) -> None:
        self.records: dict[int, dict[str, Any]] = {}
        self.sub_forms: dict[tuple[int, str], dict[str, Any]] = {}
        self.creates = 0
        self._next_id = 1

    @staticmethod
    def _ok(data: Any = None, status: int = 200) -> httpx.Response:
        return httpx.Response(status, json={"success": True, "message": "OK", "data": data})

    @staticmethod
    def _missing() -> httpx.Response:
        return httpx.Response(404, json={"success": False, "message": "Performa not found"})

    def _find(self, org: str, periode: str) -> dict[str, Any] | None:
        for rec in self.records.values():
            if rec["koperasi_id"] == org and rec["periode"] == periode:
                return rec
        return None

    def _upsert(self, org: str, body: dict[str, Any]) -> httpx.Response:
        rec = self._find(org, body["periode"])
        if rec is None:
            self.creates += 1
            rec = {"id": self._next_id, "koperasi_id": org, "periode": body["periode"]}
            self.records[self._next_id] = rec
            self._next_id += 1
        for name in ("cdi", "bdi", "odi", "kuadrant"):
            if name in body:
                rec[name] = body[name]
        return self._ok(rec, status=201)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        org, _, *rest = request.url.path[len(PREFIX):].split("/")
        method = request.method
        body = json.loads(request.content) if request.content else {}

        if method == "POST" and not rest:
            return self._upsert(org, body)

        if len(rest) == 1:
            if method == "GET" and rest[0] == "periods":
                items = [r for r in self.records.values() if r["koperasi_id"] == org]
                items.sort(key=lambda r: r["periode"], reverse=True)
                return self._ok(items)
            if method == "GET":
                rec = self._find(org, rest[0])
                return self._ok(rec) if rec else self._missing()
            if method == "DELETE":
                rec = self.records.pop(int(rest[0]), None)
                return self._ok() if rec else self._missing()

        if len(rest) == 2:
            key = (int(rest[0]), rest[1])
            if key[0] not in self.records:
                return self._missing()
            if method == "PUT":
                self.sub_forms[key] = body
                return self._ok(body)
            if method == "GET" and key in self.sub_forms:
                return self._ok(self.sub_forms[key])
            return self._missing()

        return httpx.Response(405, json={"success": False, "message": "Method not allowed"})


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def ctx(project_rules, fixed_clock, backend) -> ClientContext:
    http = HttpxApiClient(
        project_rules.api.base_url, transport=httpx.MockTransport(backend)
    )
    return ClientContext.create(project_rules, clock=fixed_clock, http=http)


@pytest.mark.anyio
async def test_questionnaire_flow(ctx, backend):
    reconciler = ctx.reconciler

    async with ctx:
        # Nothing resolved yet
        assert reconciler.performa_id_for("5", "2024-05") is None
        with pytest.raises(MissingParentError):
            await reconciler.save_bisnis(
                "5", reconciler.performa_id_for("5", "2024-05"), PerformaBisnis()
            )

        # Opening the form creates the record once
        first = await reconciler.get_or_create("5")
        second = await reconciler.get_or_create("5", "2024-05")
        assert first.id == second.id
        assert backend.creates == 1

        performa_id = reconciler.performa_id_for("5", "2024-05")
        assert performa_id == first.id

        await reconciler.save_organisasi(
            "5",
            performa_id,
            PerformaOrganisasi(
                jumlah_pengurus=5,
                status="Aktif",
                rencana_strategis=RencanaStrategis(visi=True, misi=True),
            ),
        )
        await reconciler.save_bisnis(
            "5",
            performa_id,
            PerformaBisnis(
                proyeksi_rugi_laba=True,
                hubungan_lembaga=[HubunganLembaga("BUMN", 1, 2, 3)],
            ),
        )

        bisnis = await reconciler.load_bisnis("5", "2024-05")
        assert bisnis.hubungan_lembaga == [HubunganLembaga("BUMN", 1, 2, 3)]

        report = await reconciler.questionnaire_progress("5")
        assert report == ProgressReport(organisasi=20, bisnis=12, total=16)
        assert backend.creates == 1


@pytest.mark.anyio
async def test_indicators_and_period_list(ctx, backend):
    reconciler = ctx.reconciler

    async with ctx:
        assert await reconciler.list_periods("5") == []

        await reconciler.save_indicators(
            "5", "2024-04", PerformaIndicators(cdi=0.8, bdi=0.6, odi=0.7, kuadrant=1)
        )
        saved = await reconciler.save_indicators(
            "5", "2024-04", PerformaIndicators(cdi=0.9, kuadrant=2)
        )
        assert backend.creates == 1
        assert saved.cdi == 0.9
        assert saved.kuadrant == 2

        # Writes invalidated the cached empty list
        periods = await reconciler.list_periods("5")
        assert [p.periode for p in periods] == ["2024-04"]
        assert periods[0].has_data is True

        record = await reconciler.get("5", "2024-04")
        assert record is not None
        await reconciler.delete("5", record.id)

        assert await reconciler.get("5", "2024-04") is None
        assert await reconciler.list_periods("5") == []
