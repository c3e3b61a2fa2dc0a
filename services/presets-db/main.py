"""
Onboarding Classifier Presets Service
Port: 8021

Stores named snapshots (inputs + group weights + variable weights +
thresholds) so scenarios can be reloaded and compared.
"""
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
import logging
import database

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Prometheus metrics
from prometheus_fastapi_instrumentator import Instrumentator

SERVICE_VERSION = "1.0.2"
MIN_NAME_LENGTH = 3

app = FastAPI(
    title="Onboarding Classifier Presets API",
    description="Preset storage for the Onboarding Classifier",
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

# ============== Pydantic Models ==============

class PresetPayload(BaseModel):
    """Snapshot bundle; all four parts are required"""
    inputs: Dict[str, Any] = Field(..., min_length=1, description="Questionnaire answers")
    gw: Dict[str, float] = Field(..., min_length=1, description="Group weights")
    vw: Dict[str, float] = Field(..., min_length=1, description="Variable weights")
    th: Dict[str, float] = Field(..., min_length=1, description="Tier thresholds")
    label: Optional[str] = Field(None, max_length=50, description="Payload version label")


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if len(value) < MIN_NAME_LENGTH:
        raise ValueError(f"Naam te kort (minimaal {MIN_NAME_LENGTH} tekens)")
    return value


class PresetSave(BaseModel):
    """Model for creating a preset"""
    name: str = Field(..., max_length=255, description="Preset name (made unique on save)")
    data: PresetPayload

    @field_validator("name")
    @classmethod
    def name_long_enough(cls, value: str) -> str:
        return _check_name(value)


class PresetUpdate(BaseModel):
    """Model for updating a preset; name is kept when omitted"""
    name: Optional[str] = Field(None, max_length=255)
    data: PresetPayload

    @field_validator("name")
    @classmethod
    def name_long_enough(cls, value: Optional[str]) -> Optional[str]:
        return _check_name(value)

# ============== Startup Event ==============

@app.on_event("startup")
async def startup():
    """Initialize database on startup"""
    await database.init_db()
    logger.info("Presets DB Service started on port 8021")

# ============== Health Check ==============

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "presets-db",
        "version": SERVICE_VERSION,
        "timestamp": datetime.now().isoformat()
    }

# ============== Preset CRUD Endpoints ==============

@app.get("/presets", response_model=Dict[str, Any])
async def list_presets(
    search: Optional[str] = Query(None, description="Search in preset name"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """List complete presets, newest first"""
    presets = await database.list_presets(search=search, limit=limit, offset=offset)
    return {
        "success": True,
        "count": len(presets),
        "presets": presets
    }


@app.get("/presets/{preset_id}", response_model=Dict[str, Any])
async def get_preset(preset_id: str):
    """Get preset by id or name"""
    preset = await database.get_preset(preset_id)
    if not preset:
        raise HTTPException(status_code=404, detail="Preset not found")
    return {
        "success": True,
        "preset": preset
    }


@app.post("/presets", response_model=Dict[str, Any])
async def create_preset(preset: PresetSave):
    """Create a preset; a taken name gets a ' -N' suffix"""
    record = await database.save_preset(
        name=preset.name,
        payload=preset.data.model_dump(exclude_none=True)
    )
    logger.info(f"Preset saved: {record['name']} ({record['id']})")
    return {
        "success": True,
        "preset": record,
        "message": f"Preset opgeslagen ✔ ({record['name']})"
    }


@app.put("/presets/{preset_id}", response_model=Dict[str, Any])
async def update_preset(preset_id: str, preset: PresetUpdate):
    """Overwrite name and snapshot of an existing preset"""
    count, updated_id, final_name = await database.update_preset(
        id_or_name=preset_id,
        name=preset.name,
        payload=preset.data.model_dump(exclude_none=True)
    )
    if not count:
        raise HTTPException(status_code=404, detail="Preset not found")
    return {
        "success": True,
        "count": count,
        "id": updated_id,
        "name": final_name,
        "message": f"Wijzigingen opgeslagen ✔ ({final_name})"
    }


@app.delete("/presets/{preset_id}", response_model=Dict[str, Any])
async def delete_preset(preset_id: str):
    """Delete preset(s) by id or name"""
    count = await database.delete_preset(preset_id)
    if not count:
        raise HTTPException(status_code=404, detail="Preset not found")
    return {
        "success": True,
        "count": count,
        "message": f"Verwijderd ✔ ({count})"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8021)
