from fastapi.testclient import TestClient

from signmirror.config import settings
from signmirror.main import app

client = TestClient(app)


def _payload(live_frames, reference_frames, **extra):
    return {
        "live_frames": [f.model_dump(by_alias=True) for f in live_frames],
        "reference": {
            "fps": 10,
            "duration": 1.0,
            "poseIndices": list(range(17)),
            "frames": [f.model_dump(by_alias=True, exclude_none=True) for f in reference_frames],
        },
        **extra,
    }


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_compare_returns_result_and_feedback(live_frames, reference_frames):
    response = client.post("/api/compare", json=_payload(live_frames, reference_frames, seed=3))

    assert response.status_code == 200
    body = response.json()
    assert body["result"]["score"] == 100
    assert body["result"]["mirrored"] is False
    assert body["feedback"]["stars"] == 3
    assert body["feedback"]["tips"]


def test_insufficient_attempt_serialises_missing_distance(live_frames, reference_frames):
    response = client.post("/api/compare", json=_payload(live_frames[:2], reference_frames))

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["score"] == 0
    assert result["avg_distance"] is None


def test_oversized_attempt_is_rejected(monkeypatch, live_frames, reference_frames):
    monkeypatch.setattr(settings, "max_frames", 5)
    response = client.post("/api/compare", json=_payload(live_frames, reference_frames))
    assert response.status_code == 413


def test_malformed_reference_is_rejected(live_frames):
    payload = {"live_frames": [f.model_dump(by_alias=True) for f in live_frames], "reference": {"fps": 10}}
    assert client.post("/api/compare", json=payload).status_code == 422
