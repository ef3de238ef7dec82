"""
Growth Z-Score Rule Functions — FastAPI Backend
===============================================

Exposes the rule functions and the weight-for-age reference table over HTTP.

REST API endpoints:
    GET    /health                        Health check
    GET    /functions                     List registered rule functions
    POST   /functions/{name}/evaluate     Evaluate a rule function
    GET    /reference/{sex}/{age}         Get the SD row for a sex/age
"""
import sys
import logging
import secrets
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Path as PathParam, Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, Field

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import PORT, HOST, LOG_LEVEL, ZSCORE_BRACKET_STRATEGY
from config.settings import AUTH_ENABLED, AUTH_USERNAME, AUTH_PASSWORD
from src.models.data_structures import Sex
from src.models.exceptions import (
    InvalidArgument, ReferenceLookupError, UnknownFunctionError
)
from src.models.zscore_resolver import check_strategy
from src.models.zscore_table import get_reference_table
from src.rules.functions import available_functions, get_rule_function

logger = logging.getLogger(__name__)

# ── Auth ─────────────────────────────────────────────────────────
security = HTTPBasic(auto_error=AUTH_ENABLED)

def verify_credentials(credentials: HTTPBasicCredentials = Depends(security)):
    """HTTP Basic Auth — only enforced when AUTH_ENABLED=true."""
    if not AUTH_ENABLED:
        return True
    correct_user = secrets.compare_digest(credentials.username, AUTH_USERNAME)
    correct_pass = secrets.compare_digest(credentials.password, AUTH_PASSWORD)
    if not (correct_user and correct_pass):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the bracket strategy and build the reference table on startup."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    check_strategy(ZSCORE_BRACKET_STRATEGY)
    table = get_reference_table()
    logger.info("Reference table v%s ready (%d male / %d female rows)",
                table.version, len(table.ages(Sex.MALE)),
                len(table.ages(Sex.FEMALE)))
    yield
    logger.info("Shutting down")


# ── App ──────────────────────────────────────────────────────

_deps = [Depends(verify_credentials)] if AUTH_ENABLED else []

app = FastAPI(
    title="Growth Z-Score Rule Functions API",
    description=(
        "Evaluates rule-engine functions such as d2:zScore, which places a "
        "child's weight on the WHO weight-for-age SD scale (0–60 months)."
    ),
    version="1.0.0",
    lifespan=lifespan,
    dependencies=_deps,
)


# ── Request / Response Models ─────────────────────────────────

class EvaluateRequest(BaseModel):
    arguments: List[str] = Field(..., description="Evaluated argument values")
    value_map: Dict[str, Any] = Field(default_factory=dict)
    supplementary_data: Dict[str, List[str]] = Field(default_factory=dict)

class EvaluateResponse(BaseModel):
    function: str
    result: str

class ReferenceRowResponse(BaseModel):
    sex: str
    age_months: int
    version: int
    median: float
    sd_weights: Dict[str, float]


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/health")
async def health_check():
    table = get_reference_table()
    ages = table.ages(Sex.MALE)
    return {
        "status": "healthy",
        "table_version": table.version,
        "bracket_strategy": ZSCORE_BRACKET_STRATEGY,
        "age_range_months": [ages[0], ages[-1]] if ages else [],
        "functions": available_functions(),
        "version": "1.0.0",
    }


@app.get("/functions")
async def list_functions():
    return {"functions": available_functions()}


@app.post("/functions/{name}/evaluate", response_model=EvaluateResponse)
async def evaluate_function(name: str, req: EvaluateRequest):
    try:
        function = get_rule_function(name)
        result = function.evaluate(
            req.arguments, req.value_map, req.supplementary_data
        )
    except UnknownFunctionError:
        raise HTTPException(404, f"Function '{name}' not found")
    except InvalidArgument as e:
        raise HTTPException(400, str(e))
    except ReferenceLookupError as e:
        logger.info("Lookup failed for %s%s: %s", name, req.arguments, e)
        raise HTTPException(404, str(e))

    return EvaluateResponse(function=name, result=result)


@app.get("/reference/{sex}/{age}", response_model=ReferenceRowResponse)
async def get_reference_row(
    sex: str = PathParam(..., pattern="^(male|female)$"),
    age: int = PathParam(..., ge=0),
):
    table = get_reference_table()
    key = table.key(Sex(sex), age)
    try:
        row = table.lookup(key)
    except ReferenceLookupError as e:
        raise HTTPException(404, str(e))

    return ReferenceRowResponse(
        sex=sex, age_months=age, version=key.version,
        median=round(float(row.median), 3),
        sd_weights=row.to_dict(),
    )


# ── Run ───────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("src.api.server:app", host=HOST, port=PORT, reload=True)
