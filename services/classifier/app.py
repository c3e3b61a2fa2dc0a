"""
Onboarding Classifier Service
Port: 8020

Scores prospective fulfilment clients (0-100), maps the score to a tier
(A1-C1) with lead time, compares scenarios and prepares export data.
"""
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from typing import Any, Dict, Optional
from datetime import datetime
import httpx
import logging
import os

from pydantic import ValidationError

from scoring import (
    ClassifierRequest,
    ClassifierResult,
    ScenarioCompareRequest,
    ScenarioComparison,
    GroupKey,
    VariableKind,
    VARIABLES,
    GROUP_VARIABLES,
    GROUP_TITLES,
    TIERS,
    VarWeights,
    compute_result,
    compare_scenarios,
    default_snapshot,
)
from exports import CSV_FILENAME, ReportData, build_csv_row, build_report, rows_to_csv

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Prometheus metrics
from prometheus_fastapi_instrumentator import Instrumentator

SERVICE_VERSION = "1.0.2"

app = FastAPI(
    title="Onboarding Classifier Service",
    description="Deterministic onboarding complexity score, tier and lead time",
    version=SERVICE_VERSION
)

# Initialize Prometheus metrics
Instrumentator().instrument(app).expose(app)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Preset store
PRESETS_DB_URL = os.environ.get("PRESETS_DB_URL", "http://onboarding-presets-db:8021")
PRESETS_DB_TIMEOUT = float(os.environ.get("PRESETS_DB_TIMEOUT", "10"))

REQUIRED_PRESET_KEYS = ("inputs", "gw", "vw", "th")


# ============== Models ==============

class ReportRequest(ClassifierRequest):
    preset_name: Optional[str] = None


# ============== Helpers ==============

def _score(request: ClassifierRequest) -> ClassifierResult:
    result = compute_result(request.inputs, request.gw, request.vw, request.th)
    for flag in result.flags:
        logger.warning(f"⚠️ {flag.code}: {flag.message}")
    return result


async def fetch_preset(preset_id: str) -> Dict[str, Any]:
    """Load one preset record from the preset store"""
    async with httpx.AsyncClient(timeout=PRESETS_DB_TIMEOUT) as client:
        response = await client.get(f"{PRESETS_DB_URL}/presets/{preset_id}")
        response.raise_for_status()
        return response.json()["preset"]


def snapshot_from_preset(preset: Dict[str, Any]) -> ClassifierRequest:
    """Turn a stored bundle into a snapshot; incomplete bundles are rejected"""
    data = preset.get("data") or {}
    missing = [key for key in REQUIRED_PRESET_KEYS if data.get(key) is None]
    if missing:
        raise HTTPException(
            status_code=422,
            detail=f"Preset is ongeldig - ontbrekende onderdelen: {', '.join(missing)}"
        )
    try:
        return ClassifierRequest(**{key: data[key] for key in REQUIRED_PRESET_KEYS})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Preset is ongeldig: {e.errors()}")


# ============== API Endpoints ==============

@app.get("/")
async def root():
    return {
        "service": "Onboarding Classifier Service",
        "version": SERVICE_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "service": "classifier",
        "version": SERVICE_VERSION,
        "timestamp": datetime.now().isoformat()
    }


@app.get("/defaults", response_model=ClassifierRequest)
async def get_defaults():
    """Default inputs, weights and thresholds (used for reset)"""
    return default_snapshot()


@app.get("/fields")
async def get_fields():
    """Form metadata: groups, variables, scales and default weights"""
    var_weights = VarWeights()
    groups = []
    for group in GroupKey:
        variables = []
        for key in GROUP_VARIABLES[group]:
            definition = VARIABLES[key]
            scale = definition.scale
            entry: Dict[str, Any] = {
                "key": key,
                "label": definition.label,
                "kind": definition.kind.value,
                "default_weight": var_weights.weight_for(key),
            }
            if definition.kind == VariableKind.LINEAR:
                entry["span"] = scale.span
                entry["offset"] = scale.offset
            elif definition.kind == VariableKind.CATEGORICAL:
                entry["options"] = scale.options
                entry["scores"] = scale.scores
                entry["fallback"] = scale.fallback
            else:
                entry["options"] = scale.known_options
                entry["inverted"] = scale.inverted
            variables.append(entry)
        groups.append({
            "key": group.value,
            "title": GROUP_TITLES[group],
            "variables": variables,
        })

    return {
        "groups": groups,
        "tiers": [tier.model_dump() for tier in TIERS.values()],
    }


@app.post("/classify", response_model=ClassifierResult)
async def classify_snapshot(request: ClassifierRequest):
    """
    Score one snapshot.

    Weights and thresholds fall back to defaults when omitted.
    Configuration problems (group weights not summing to 1.0,
    thresholds out of order) come back as warning flags.
    """
    try:
        return _score(request)
    except Exception as e:
        logger.error(f"❌ Classification failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/compare", response_model=ScenarioComparison)
async def compare(request: ScenarioCompareRequest):
    """Side-by-side comparison of two scenarios (A/B)"""
    try:
        return compare_scenarios(request.a, request.b)
    except Exception as e:
        logger.error(f"❌ Scenario compare failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/presets/{preset_id}/classify")
async def classify_preset(preset_id: str):
    """Load a preset from the preset store and score it"""
    try:
        logger.info(f"🌐 Preset request: {preset_id}")
        preset = await fetch_preset(preset_id)
    except httpx.TimeoutException as e:
        logger.error(f"⏱️ Preset store timeout: {str(e)}")
        raise HTTPException(status_code=504, detail=f"Preset store timeout: {str(e)}")
    except httpx.HTTPStatusError as e:
        logger.error(f"❌ Preset store HTTP error: {e.response.status_code} - {str(e)}")
        raise HTTPException(status_code=e.response.status_code, detail=f"Preset store error: {str(e)}")
    except Exception as e:
        logger.error(f"❌ Preset fetch failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch preset: {type(e).__name__}: {str(e)}")

    snapshot = snapshot_from_preset(preset)
    return {
        "preset": {"id": preset.get("id"), "name": preset.get("name")},
        "snapshot": snapshot.model_dump(),
        "result": _score(snapshot).model_dump(mode="json"),
    }


@app.post("/export/csv")
async def export_csv(request: ClassifierRequest):
    """CSV with inputs, group scores, total, class and lead time"""
    try:
        result = _score(request)
        csv_text = rows_to_csv([build_csv_row(request.inputs, result)])
    except Exception as e:
        logger.error(f"❌ CSV export failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'}
    )


@app.post("/export/report", response_model=ReportData)
async def export_report(request: ReportRequest):
    """Data for the PDF summary (classification, lead time, input sections)"""
    try:
        result = _score(request)
        return build_report(request.inputs, result, preset_name=request.preset_name)
    except Exception as e:
        logger.error(f"❌ Report export failed: {type(e).__name__}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8020)
