"""Ledger upload API tests."""

import pytest
from httpx import AsyncClient

from autoreconcile.config import settings

LEDGER_CSV = (
    "BusA,ข้อความ,Tot.rpt.pr\n"
    "1001,KBANK S/A 123-4-56789-0,1500.50\n"
    "1002,SCB C/A 234-5-67890-1,\"2,000.00\"\n"
    ",Total,*\n"
).encode()


@pytest.mark.asyncio
async def test_upload_ledger(client: AsyncClient, session) -> None:
    response = await client.post("/ledger", files={"file": ("ledger.csv", LEDGER_CSV, "text/csv")})

    assert response.status_code == 200
    data = response.json()
    assert data["filename"] == "ledger.csv"
    assert data["record_count"] == 2
    assert data["items"][0] == {
        "id": "ledger-1",
        "branch_code": "1001",
        "narrative": "KBANK S/A 123-4-56789-0",
        "balance": "1500.50",
        "account_class": "S/A",
    }
    assert data["items"][1]["balance"] == "2000.00"
    assert len(session.ledger_records) == 2


@pytest.mark.asyncio
async def test_upload_replaces_previous_ledger(client: AsyncClient) -> None:
    await client.post("/ledger", files={"file": ("ledger.csv", LEDGER_CSV, "text/csv")})
    single = "BusA,Text,Balance\n9999,Cash,1\n".encode()
    await client.post("/ledger", files={"file": ("ledger.csv", single, "text/csv")})

    response = await client.get("/ledger")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["branch_code"] == "9999"


@pytest.mark.asyncio
async def test_upload_invalid_ledger(client: AsyncClient, session) -> None:
    content = "BusA,Text\n1001,Cash\n".encode()

    response = await client.post("/ledger", files={"file": ("ledger.csv", content, "text/csv")})

    assert response.status_code == 400
    assert "Balance column" in response.json()["detail"]
    assert session.error == response.json()["detail"]
    assert session.ledger_records == []


@pytest.mark.asyncio
async def test_upload_unsupported_type(client: AsyncClient) -> None:
    response = await client.post("/ledger", files={"file": ("ledger.txt", b"hello", "text/plain")})

    assert response.status_code == 400
    assert "Unsupported ledger file type" in response.json()["detail"]


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, monkeypatch) -> None:
    monkeypatch.setattr(settings, "max_upload_bytes", 16)

    response = await client.post("/ledger", files={"file": ("ledger.csv", LEDGER_CSV, "text/csv")})

    assert response.status_code == 413


@pytest.mark.asyncio
async def test_clear_ledger(client: AsyncClient) -> None:
    await client.post("/ledger", files={"file": ("ledger.csv", LEDGER_CSV, "text/csv")})

    response = await client.delete("/ledger")

    assert response.status_code == 204
    assert (await client.get("/ledger")).json() == {"items": [], "total": 0}
