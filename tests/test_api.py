"""
Tests for the Growth Z-Score Rule Functions API
Run: pytest tests/test_api.py -v
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from src.api import server
from src.api.server import app

client = TestClient(app)


class TestHealthAndInfo:

    def test_health(self):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        assert data["table_version"] == 1
        assert data["age_range_months"] == [0, 60]
        assert "d2:zScore" in data["functions"]

    def test_list_functions(self):
        r = client.get("/functions")
        assert r.status_code == 200
        assert r.json()["functions"] == ["d2:zScore"]

    def test_docs_available(self):
        r = client.get("/docs")
        assert r.status_code == 200


class TestEvaluate:

    def test_median(self):
        r = client.post("/functions/d2:zScore/evaluate", json={
            "arguments": ["23", "12", "", "male"],
        })
        assert r.status_code == 200
        assert r.json() == {"function": "d2:zScore", "result": "0"}

    def test_interpolated(self):
        r = client.post("/functions/d2:zScore/evaluate", json={
            "arguments": ["6", "7", "", "female"],
            "value_map": {"ignored": 1},
            "supplementary_data": {"orgUnit": ["abc"]},
        })
        assert r.status_code == 200
        assert r.json()["result"] == "0.8780488"

    def test_too_few_arguments(self):
        r = client.post("/functions/d2:zScore/evaluate", json={
            "arguments": ["6", "7"],
        })
        assert r.status_code == 400
        assert "found: 2" in r.json()["detail"]

    def test_non_numeric(self):
        r = client.post("/functions/d2:zScore/evaluate", json={
            "arguments": ["six", "7", "", "m"],
        })
        assert r.status_code == 400

    def test_missing_reference_row(self):
        r = client.post("/functions/d2:zScore/evaluate", json={
            "arguments": ["100", "12", "", "m"],
        })
        assert r.status_code == 404
        assert "age=100" in r.json()["detail"]

    def test_unknown_function(self):
        r = client.post("/functions/d2:bmi/evaluate", json={
            "arguments": ["1", "2", "3", "4"],
        })
        assert r.status_code == 404


class TestReferenceEndpoint:

    def test_male_row(self):
        r = client.get("/reference/male/6")
        assert r.status_code == 200
        data = r.json()
        assert data["median"] == pytest.approx(7.9)
        assert data["version"] == 1
        assert list(data["sd_weights"]) == ["-3", "-2", "-1", "0", "1", "2", "3"]
        assert data["sd_weights"]["3"] == pytest.approx(10.9)

    def test_age_not_covered(self):
        r = client.get("/reference/female/61")
        assert r.status_code == 404

    def test_invalid_sex(self):
        r = client.get("/reference/unknown/6")
        assert r.status_code == 422


class TestStartup:

    def test_startup_succeeds(self):
        with TestClient(app) as started:
            assert started.get("/health").status_code == 200

    def test_unknown_strategy_fails_startup(self, monkeypatch):
        monkeypatch.setattr(server, "ZSCORE_BRACKET_STRATEGY", "spline")

        async def start():
            async with server.lifespan(app):
                pass

        with pytest.raises(ValueError, match="spline"):
            asyncio.run(start())
