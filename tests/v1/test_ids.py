"""Tests for identifier generation and decoding endpoints."""

from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from idforge.api.v1.endpoints.ids import get_id_generator_dep
from idforge.core.layout import MAX_UINT64, IdentifierLayout
from idforge.services.generator import IdGenerator
from tests.conftest import REFERENCE_EPOCH, ManualClock, ScriptedClock

# Test constants
BATCH_SIZE = 25


def _override(app: FastAPI, generator: IdGenerator) -> None:
    app.dependency_overrides[get_id_generator_dep] = lambda: generator


def test_generate_single_id(client: TestClient) -> None:
    """Test issuing one identifier with the configured node identity."""
    r = client.post("/api/v1/ids")
    assert r.status_code == status.HTTP_201_CREATED
    data = r.json()
    assert len(data["ids"]) == 1
    assert data["ids_str"] == [str(data["ids"][0])]
    assert data["datacenter_id"] == 2
    assert data["worker_id"] == 3


def test_generate_batch_is_increasing(client: TestClient) -> None:
    """Test a batch request returns strictly increasing identifiers."""
    r = client.post("/api/v1/ids", params={"count": BATCH_SIZE})
    assert r.status_code == status.HTTP_201_CREATED
    ids = r.json()["ids"]
    assert len(ids) == BATCH_SIZE
    assert all(a < b for a, b in zip(ids, ids[1:]))


def test_consecutive_requests_are_increasing(client: TestClient) -> None:
    """Test the process-wide generator is shared between requests."""
    first = client.post("/api/v1/ids").json()["ids"][0]
    second = client.post("/api/v1/ids").json()["ids"][0]
    assert second > first


def test_generate_rejects_bad_counts(client: TestClient) -> None:
    """Test batch size validation."""
    assert client.post("/api/v1/ids", params={"count": 0}).status_code == (
        status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    r = client.post("/api/v1/ids", params={"count": 1_000_000})
    assert r.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "count must not exceed" in r.json()["detail"]


def test_clock_rollback_maps_to_retryable_error(app: FastAPI, client: TestClient) -> None:
    """Test a rolled-back clock surfaces as 503 with Retry-After."""
    t = REFERENCE_EPOCH + 10_000
    generator = IdGenerator(
        2, 3, IdentifierLayout(epoch=REFERENCE_EPOCH), clock=ScriptedClock([t, t - 1500])
    )
    _override(app, generator)

    assert client.post("/api/v1/ids").status_code == status.HTTP_201_CREATED
    r = client.post("/api/v1/ids")
    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert r.headers["retry-after"] == "2"
    detail = r.json()["detail"]
    assert detail["error"] == "clock_rolled_back"
    assert detail["rollback_ms"] == 1500


def test_sequence_wait_timeout_maps_to_retryable_error(app: FastAPI, client: TestClient) -> None:
    """Test an exhausted sequence on a stuck clock surfaces as 503."""
    layout = IdentifierLayout(epoch=REFERENCE_EPOCH, sequence_bits=0)
    generator = IdGenerator(
        0, 0, layout, clock=ManualClock(REFERENCE_EPOCH + 1), wait_timeout_ms=1
    )
    _override(app, generator)

    r = client.post("/api/v1/ids", params={"count": 2})
    assert r.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert r.json()["detail"]["error"] == "sequence_wait_timeout"
    assert r.headers["retry-after"] == "1"


def test_clock_before_epoch_is_server_error(app: FastAPI, client: TestClient) -> None:
    """Test a clock before the epoch surfaces as 500."""
    generator = IdGenerator(
        0, 0, IdentifierLayout(epoch=REFERENCE_EPOCH), clock=ManualClock(REFERENCE_EPOCH - 1)
    )
    _override(app, generator)

    r = client.post("/api/v1/ids")
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json()["detail"]["error"] == "timestamp_out_of_range"


def test_decode_round_trip(app: FastAPI, client: TestClient) -> None:
    """Test decoding an identifier issued by the service."""
    generator = IdGenerator(
        2, 3, IdentifierLayout(epoch=REFERENCE_EPOCH), clock=ManualClock(REFERENCE_EPOCH + 100)
    )
    _override(app, generator)

    issued = client.post("/api/v1/ids").json()["ids"][0]
    assert issued == (100 << 22) | (2 << 17) | (3 << 12)

    r = client.get(f"/api/v1/ids/{issued}")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["id"] == issued
    assert data["id_str"] == str(issued)
    assert data["timestamp_ms"] == REFERENCE_EPOCH + 100
    assert data["datacenter_id"] == 2
    assert data["worker_id"] == 3
    assert data["sequence"] == 0
    assert data["timestamp"].startswith("2016-11-26T13:21:05.731")


def test_decode_zero(client: TestClient) -> None:
    """Test zero decodes to the epoch rather than failing."""
    r = client.get("/api/v1/ids/0")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["sequence"] == 0
    assert data["worker_id"] == 0


def test_decode_timestamp_past_year_9999(app: FastAPI, client: TestClient) -> None:
    """Test a narrow layout decodes the largest identifier without a datetime."""
    narrow = IdentifierLayout(
        epoch=REFERENCE_EPOCH, datacenter_bits=2, worker_bits=2, sequence_bits=8
    )
    _override(app, IdGenerator(0, 0, narrow))
    r = client.get(f"/api/v1/ids/{MAX_UINT64}")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["timestamp"] is None
    assert data["timestamp_ms"] == (MAX_UINT64 >> 12) + REFERENCE_EPOCH
    assert (data["datacenter_id"], data["worker_id"], data["sequence"]) == (3, 3, 255)


def test_decode_rejects_invalid_identifiers(client: TestClient) -> None:
    """Test negative, oversized and non-numeric identifiers."""
    assert client.get("/api/v1/ids/-1").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert client.get(f"/api/v1/ids/{1 << 64}").status_code == (
        status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    assert client.get("/api/v1/ids/not-a-number").status_code == (
        status.HTTP_422_UNPROCESSABLE_ENTITY
    )


def test_bounds(client: TestClient) -> None:
    """Test the per-millisecond identifier range endpoint."""
    ts = REFERENCE_EPOCH + 1_000
    r = client.get(f"/api/v1/ids/bounds/{ts}")
    assert r.status_code == status.HTTP_200_OK
    data = r.json()
    assert data["timestamp_ms"] == ts
    assert data["lower"] == 1_000 << 22
    assert data["upper"] == (1_001 << 22) - 1
