"""
Emergency Clinical Reasoning - FastAPI Application

API endpoints for:
- Full assessment of a primary survey (differentials, interventions, protocols)
- Ranked differentials only
- Reference catalogues (registered diagnoses, dangerous overlaps)
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from resus.config import settings
from resus.core.interventions import BUNDLES
from resus.core.multisystem import CONDITION_SYSTEMS, DANGEROUS_OVERLAPS, OVERLAP_THRESHOLD
from resus.core.reasoning import DifferentialGenerator
from resus.models.assessment import (
    AssessmentResponse,
    DiagnosesResponse,
    DiagnosisInfo,
    DifferentialsResponse,
    HealthResponse,
    OverlapCatalogueResponse,
)
from resus.models.survey import PrimarySurveyData
from resus.services.assessment import AssessmentService
from resus.utils import ClinicalReasoningError, get_logger, setup_logging

logger = get_logger(__name__)

START_TIME = datetime.now()

_assessment_service = AssessmentService()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and expose the service: startup → yield → shutdown."""
    setup_logging(settings.log_level, settings.log_file)
    app.state.assessment_service = _assessment_service
    logger.info(
        f"{settings.api_title} v{settings.api_version} ready, "
        f"{len(DifferentialGenerator.registered_diagnoses())} diagnoses, {len(BUNDLES)} bundles"
    )
    yield
    logger.info(f"{settings.api_title} shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.api_title,
    description="Differential diagnosis, tiered interventions and integrated protocols from an ABCDE primary survey",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ClinicalReasoningError)
async def clinical_reasoning_error_handler(request: Request, exc: ClinicalReasoningError):
    logger.warning(f"{request.method} {request.url.path} → {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=settings.api_version,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.post("/api/v1/assessments/analyze", response_model=AssessmentResponse, tags=["Assessment"])
async def analyze_assessment(survey: PrimarySurveyData):
    """
    Run the full reasoning pipeline on a primary survey.

    Returns 422 with error code NO_DIFFERENTIAL when no diagnosis clears the
    inclusion threshold.
    """
    result = await run_in_threadpool(_assessment_service.analyze, survey)
    return AssessmentResponse.model_validate(result.to_dict())


@app.post("/api/v1/differentials", response_model=DifferentialsResponse, tags=["Assessment"])
async def rank_differentials(survey: PrimarySurveyData):
    """Ranked differentials only.  An empty list is a valid answer."""
    generator = _assessment_service.generator
    differentials = await run_in_threadpool(generator.generate, survey)
    return DifferentialsResponse.model_validate(DifferentialGenerator.summarise(differentials))


@app.get("/api/v1/diagnoses", response_model=DiagnosesResponse, tags=["Reference"])
async def list_diagnoses():
    """
    List every registered diagnosis with bundle availability and organ systems.
    """
    gates = DifferentialGenerator.patient_type_gates()
    return DiagnosesResponse(
        diagnoses=[
            DiagnosisInfo(
                id=diagnosis_id,
                bundled=diagnosis_id in BUNDLES,
                systems=[s.value for s in CONDITION_SYSTEMS.get(diagnosis_id, ())],
                patient_types=gates.get(diagnosis_id),
            )
            for diagnosis_id in DifferentialGenerator.registered_diagnoses()
        ]
    )


@app.get("/api/v1/overlaps", response_model=OverlapCatalogueResponse, tags=["Reference"])
async def list_overlaps():
    """List the dangerous-overlap catalogue."""
    return OverlapCatalogueResponse(
        threshold=OVERLAP_THRESHOLD,
        overlaps=[o.to_dict() for o in DANGEROUS_OVERLAPS],
    )


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
