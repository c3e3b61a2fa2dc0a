"""
API tests for the Onboarding Classifier Service
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
import pytest
from fastapi.testclient import TestClient

import app as classifier_app
from scoring import default_snapshot


@pytest.fixture
def client():
    return TestClient(classifier_app.app)


@pytest.fixture
def snapshot():
    return default_snapshot().model_dump(mode="json")


def stored_preset(snapshot, **overrides):
    data = dict(snapshot, label="v1.0.2")
    data.update(overrides)
    return {
        "id": "6f1c2a34-1b7e-4a1f-9a39-2d4c8e7f0b11",
        "name": "Demo klant",
        "data": data,
    }


class TestMetaEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_defaults(self, client):
        body = client.get("/defaults").json()
        assert body["inputs"]["skuCount"] == 300
        assert body["inputs"]["postnlApis"]["Track & Trace"] is True
        assert body["gw"]["operationeel"] == 0.25
        assert body["vw"]["serviceUitbreiding"] == 1.0
        assert body["th"] == {"A1": 20, "A2": 35, "A3": 50, "B1": 65, "B2": 80, "C1": 100}

    def test_fields(self, client):
        body = client.get("/fields").json()
        assert [g["key"] for g in body["groups"]] == [
            "operationeel", "technisch", "configuratie", "organisatie",
            "processen", "rapportage", "contract",
        ]
        technisch = {v["key"]: v for v in body["groups"][1]["variables"]}
        assert technisch["platformType"]["kind"] == "categorical"
        assert technisch["platformType"]["fallback"] == 50
        assert "Shopify" in technisch["platformType"]["options"]
        assert technisch["postnlApis"]["inverted"] is True
        assert len(body["tiers"]) == 6


class TestClassify:

    def test_default_snapshot(self, client, snapshot):
        response = client.post("/classify", json=snapshot)
        assert response.status_code == 200
        body = response.json()
        assert body["total_score_label"] == "37.5"
        assert body["classification"]["code"] == "A3"
        assert body["classification"]["label"] == "A3 — 4–6 weken"
        assert len(body["top_contributors"]) == 3
        assert len(body["group_scores"]) == 7
        assert body["flags"] == []

    def test_weights_default_when_omitted(self, client, snapshot):
        body = client.post("/classify", json={"inputs": snapshot["inputs"]}).json()
        assert body["total_score_label"] == "37.5"

    def test_weight_sum_warning(self, client, snapshot):
        snapshot["gw"] = {key: 1.0 for key in snapshot["gw"]}
        body = client.post("/classify", json=snapshot).json()
        assert [f["code"] for f in body["flags"]] == ["GROUP_WEIGHTS_SUM"]
        assert body["total_score_progress"] == 100
        assert body["classification"]["code"] == "C1"

    def test_missing_field_rejected(self, client, snapshot):
        del snapshot["inputs"]["skuCount"]
        assert client.post("/classify", json=snapshot).status_code == 422

    def test_negative_weight_rejected(self, client, snapshot):
        snapshot["vw"]["skuCount"] = -1
        assert client.post("/classify", json=snapshot).status_code == 422


class TestCompare:

    def test_compare(self, client, snapshot):
        other = dict(snapshot, name="Scenario B")
        other["inputs"] = dict(snapshot["inputs"], typeKoppeling="handmatig")
        response = client.post("/compare", json={"a": dict(snapshot, name="Scenario A"), "b": other})
        assert response.status_code == 200
        body = response.json()
        assert body["a"]["name"] == "Scenario A"
        assert body["b"]["name"] == "Scenario B"
        assert body["score_delta"] > 0
        assert body["tier_changed"] is False


class TestPresetClassify:

    def test_scores_stored_preset(self, client, snapshot, monkeypatch):
        async def fake_fetch(preset_id):
            return stored_preset(snapshot)

        monkeypatch.setattr(classifier_app, "fetch_preset", fake_fetch)
        response = client.get("/presets/Demo klant/classify")
        assert response.status_code == 200
        body = response.json()
        assert body["preset"]["name"] == "Demo klant"
        assert body["result"]["classification"]["code"] == "A3"

    def test_incomplete_preset_rejected(self, client, snapshot, monkeypatch):
        async def fake_fetch(preset_id):
            return stored_preset(snapshot, th=None)

        monkeypatch.setattr(classifier_app, "fetch_preset", fake_fetch)
        response = client.get("/presets/Demo klant/classify")
        assert response.status_code == 422
        assert "th" in response.json()["detail"]

    def test_empty_weights_part_counts_as_present(self, client, snapshot, monkeypatch):
        async def fake_fetch(preset_id):
            return stored_preset(snapshot, gw={})

        monkeypatch.setattr(classifier_app, "fetch_preset", fake_fetch)
        response = client.get("/presets/Demo klant/classify")
        assert response.status_code == 200
        assert response.json()["result"]["total_score_label"] == "37.5"

    def test_missing_preset_passes_404(self, client, monkeypatch):
        async def fake_fetch(preset_id):
            request = httpx.Request("GET", f"http://presets/presets/{preset_id}")
            response = httpx.Response(404, request=request)
            raise httpx.HTTPStatusError("not found", request=request, response=response)

        monkeypatch.setattr(classifier_app, "fetch_preset", fake_fetch)
        assert client.get("/presets/unknown/classify").status_code == 404

    def test_store_timeout(self, client, monkeypatch):
        async def fake_fetch(preset_id):
            raise httpx.ReadTimeout("too slow")

        monkeypatch.setattr(classifier_app, "fetch_preset", fake_fetch)
        assert client.get("/presets/unknown/classify").status_code == 504


class TestExports:

    def test_csv_download(self, client, snapshot):
        response = client.post("/export/csv", json=snapshot)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="onboarding-classifier.csv"' in response.headers["content-disposition"]
        assert response.text.startswith('"totalScore","class","lead"')

    def test_report_data(self, client, snapshot):
        response = client.post("/export/report", json=dict(snapshot, preset_name="Demo klant"))
        assert response.status_code == 200
        body = response.json()
        assert body["preset_name"] == "Demo klant"
        assert body["classification"] == "A3"
        assert [s["title"] for s in body["sections"]] == ["Operationele kenmerken", "Technische integratie"]
        assert body["filename"].endswith(".pdf")
