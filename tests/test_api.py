"""End-to-end tests for the HTTP API."""

from app.core.config import settings


def csv_bytes(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


def upload(content: bytes, filename: str = "report.csv", content_type: str = "text/csv"):
    return {"file": (filename, content, content_type)}


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "timestamp" in response.json()


async def test_upload_then_read_track_stats(client):
    content = csv_bytes(
        "ISRC,Title,Artist,Store,Earnings (USD),Quantity",
        "US1234567890,Song,Artist,Spotify,1.25,10",
        "US1234567890,Song,Artist,Apple Music,2.75,20",
    )

    response = await client.post("/api/upload", files=upload(content), data={"fileType": "distributor"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["file"]["recordCount"] == 2
    assert body["file"]["tracksCreated"] == 1
    assert body["file"]["filename"] == "report.csv"

    tracks = (await client.get("/api/tracks")).json()
    assert len(tracks) == 1
    track = tracks[0]
    assert track["isrc"] == "US1234567890"
    assert track["totalEarnings"] == "4.00"
    assert track["totalStreams"] == 30
    assert track["storeCount"] == 2

    detail = await client.get(f"/api/tracks/{track['id']}")
    assert detail.status_code == 200
    assert detail.json()["totalEarnings"] == "4.00"

    royalties = (await client.get(f"/api/tracks/{track['id']}/royalties")).json()
    assert len(royalties) == 2
    assert {r["earnings"] for r in royalties} == {"1.25", "2.75"}
    assert all(r["currency"] == "USD" for r in royalties)

    files = (await client.get("/api/files")).json()
    assert len(files) == 1
    assert files[0]["status"] == "completed"
    assert files[0]["recordCount"] == 2
    assert files[0]["originalName"] == "report.csv"


async def test_commission_is_stored_as_literal_number(client):
    content = csv_bytes(
        "ISRC,Title,Artist,Store,Earnings (£),Commission %,Label Notes",
        "GB1234567890,Song,Artist,Spotify,1.00,15%,promo",
    )

    await client.post("/api/upload", files=upload(content))

    entry = (await client.get("/api/royalties")).json()[0]
    assert entry["commission"] == "15"
    assert entry["currency"] == "GBP"
    assert entry["extras"] == {"Label Notes": "promo"}


async def test_missing_columns_response(client):
    content = csv_bytes("ISRC,Store", "US1234567890,Spotify")

    response = await client.post("/api/upload", files=upload(content))

    assert response.status_code == 400
    assert response.json() == {
        "error": "Missing required columns",
        "required": ["ISRC", "Title", "Artist"],
        "found": ["ISRC", "Store"],
    }

    files = (await client.get("/api/files")).json()
    assert files[0]["status"] == "failed"
    assert (await client.get("/api/tracks")).json() == []


async def test_empty_file_response(client):
    response = await client.post("/api/upload", files=upload(b""))

    assert response.status_code == 400
    assert response.json() == {"error": "No records found in CSV"}


async def test_non_csv_is_rejected_before_any_record(client):
    response = await client.post(
        "/api/upload",
        files=upload(b"ISRC,Title,Artist\n", filename="report.pdf", content_type="application/pdf"),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Only CSV files are allowed"}
    assert (await client.get("/api/files")).json() == []


async def test_oversized_upload_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)

    response = await client.post("/api/upload", files=upload(b"ISRC,Title,Artist\nA,B,C\n"))

    assert response.status_code == 413
    assert (await client.get("/api/files")).json() == []


async def test_unknown_track_is_404(client):
    response = await client.get("/api/tracks/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json() == {"error": "Track not found"}


async def test_prs_upload_and_reports(client):
    content = csv_bytes(
        "Work Title,Work No,IP1,Your Share %,Usage & Territory,Production,HHHH:MM:SS,Performances,Royalty £",
        "My Song,111,WRITER A,50%,RADIO UK,BBC Radio 1,00:03:30,10,1.234",
        "My Song,111,WRITER A,50%,TV UK,ITV,00:01:00,2,2.50",
        "Other,222,WRITER B,100%,,BBC Radio 2,00:02:00,1,0.10",
    )

    response = await client.post(
        "/api/prs-statements/upload",
        files=upload(content, filename="prs.csv"),
        data={"statementPeriod": "2024 Q1", "statementDate": "2024-04-30"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["worksProcessed"] == 2
    assert body["entriesProcessed"] == 3
    assert body["totalRoyalties"] == "3.83"

    statements = (await client.get("/api/prs-statements")).json()
    assert statements[0]["statementPeriod"] == "2024 Q1"
    assert statements[0]["statementDate"] == "2024-04-30"
    assert statements[0]["workCount"] == 2
    assert statements[0]["status"] == "completed"

    detail = (await client.get(f"/api/prs-statements/{body['statementId']}")).json()
    assert len(detail["entries"]) == 3
    assert {e["durationSeconds"] for e in detail["entries"]} == {210, 60, 120}

    works = (await client.get("/api/works")).json()
    assert [w["workNo"] for w in works] == ["111", "222"]
    assert works[0]["totalRoyalties"] == "3.73"
    assert works[0]["yourSharePercent"] == "50.00"

    work = (await client.get(f"/api/works/{works[0]['id']}")).json()
    assert len(work["royalties"]) == 2

    summary = (await client.get("/api/performance-royalties/summary")).json()
    assert summary["totalStatements"] == 1
    assert summary["totalWorks"] == 2
    assert summary["totalRoyalties"] == "3.83"
    assert summary["totalPerformances"] == 13
    assert summary["territoryBreakdown"]["Unknown"] == {"count": 1, "royalties": "0.10"}
    assert summary["latestStatement"]["id"] == body["statementId"]

    entries = (await client.get("/api/performance-royalties")).json()
    assert len(entries) == 3


async def test_empty_performance_summary(client):
    summary = (await client.get("/api/performance-royalties/summary")).json()

    assert summary["totalRoyalties"] == "0"
    assert summary["territoryBreakdown"] == {}
    assert summary["latestStatement"] is None
