from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chromasift.api.v1 import router as v1_router
from chromasift.config import config
from chromasift.schemas import HealthResponse

app = FastAPI(
    title="chromasift Palette Backend",
    description="Palette extraction from raw pixel buffers with interchangeable quantizers",
    version=config.SERVICE_VERSION
)

# Add CORS middleware with basic configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Service health status."""
    return HealthResponse(ok=True, version=config.SERVICE_VERSION, service=config.SERVICE_NAME)


@app.get("/")
def root():
    return {
        "service": config.SERVICE_NAME,
        "version": config.SERVICE_VERSION,
        "endpoints": ["/healthz", "/v1/algorithms", "/v1/quantize", "/v1/background",
                      "/v1/compare", "/v1/metrics"]
    }
