"""
EVERLIV AI Service - FastAPI Backend
DeepSeek-powered blood test interpretation and health recommendations.

Analysis endpoints never fail because the model did: a conservative
fallback result is returned instead. Only malformed requests are rejected.
"""
from fastapi import Depends, FastAPI, HTTPException, Request, UploadFile, File as FastAPIFile
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
from PIL import Image, UnidentifiedImageError
import base64
import io
import time
import uuid

from .config import DeepSeekConfig
from .input_sanitization import (
    MAX_IMAGE_BYTES,
    sanitize_analysis_text,
    sanitize_question,
    split_data_url,
    validate_base64_image,
    validate_image_type,
)
from .models import (
    AnalyzeImageRequest,
    AnalyzeTextRequest,
    BiomarkerAnalysisRequest,
    BiomarkerRecommendations,
    EnhancedBloodAnalysisResults,
    HealthRecommendations,
    HealthRecommendationsRequest,
    ImageConsultationRequest,
    ImageConsultationResponse,
)
from .service import HealthAnalysisService
from .structured_logging import StructuredLogger, log_request, set_request_id, setup_logging

logger = StructuredLogger(__name__)

MAX_UPLOAD_DIMENSION = 1600


def create_app(service: Optional[HealthAnalysisService] = None) -> FastAPI:
    """Build the ASGI app.

    When no service is given, configuration is read from the environment at
    startup and a missing DEEPSEEK_API_KEY aborts the launch.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = service is None
        if owned:
            config = DeepSeekConfig.from_env()
            setup_logging(use_json=config.log_json)
            app.state.service = HealthAnalysisService.from_config(config)
        else:
            app.state.service = service
        logger.info("Ready to serve requests.")
        yield
        logger.info("Shutting down...")
        if owned:
            await app.state.service.close()

    app = FastAPI(
        title="EVERLIV AI Service",
        description="DeepSeek-powered blood analysis interpretation API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        """Middleware for request ID tracking and logging."""
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        set_request_id(request_id)

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        if request.url.path not in ["/health", "/docs", "/openapi.json"]:
            log_request(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers["X-Request-ID"] = request_id
        return response

    def get_service(request: Request) -> HealthAnalysisService:
        return request.app.state.service

    @app.get("/health")
    async def health_check(svc: HealthAnalysisService = Depends(get_service)):
        return {
            "status": "healthy",
            "chat_model": svc.config.chat_model,
            "vision_model": svc.config.vision_model,
        }

    @app.post("/biomarkers/recommendations", response_model=BiomarkerRecommendations)
    async def biomarker_recommendations(
        request: BiomarkerAnalysisRequest,
        svc: HealthAnalysisService = Depends(get_service),
    ):
        return await svc.analyze_biomarker(request)

    @app.post("/blood-analyses/analyze-text", response_model=EnhancedBloodAnalysisResults)
    async def analyze_text(
        request: AnalyzeTextRequest,
        svc: HealthAnalysisService = Depends(get_service),
    ):
        text = sanitize_analysis_text(request.text)
        if not text:
            raise HTTPException(status_code=400, detail="Text is required")
        return await svc.analyze_blood_panel_text(text)

    def _checked_image(payload: str, mime_type: str) -> tuple[str, str]:
        image_base64, url_mime = split_data_url(payload)
        try:
            image_base64 = validate_base64_image(image_base64)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return image_base64, url_mime or mime_type

    @app.post("/blood-analyses/analyze-image", response_model=EnhancedBloodAnalysisResults)
    async def analyze_image(
        request: AnalyzeImageRequest,
        svc: HealthAnalysisService = Depends(get_service),
    ):
        image_base64, mime_type = _checked_image(request.image_base64, request.mime_type)
        return await svc.analyze_blood_panel_image(image_base64, mime_type)

    @app.post("/blood-analyses/analyze-image-file", response_model=EnhancedBloodAnalysisResults)
    async def analyze_image_file(
        file: UploadFile = FastAPIFile(...),
        svc: HealthAnalysisService = Depends(get_service),
    ):
        if not validate_image_type(file.content_type or ""):
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported image type: {file.content_type}",
            )

        contents = await file.read()
        if len(contents) > MAX_IMAGE_BYTES:
            raise HTTPException(status_code=413, detail="Image is too large")

        try:
            image = Image.open(io.BytesIO(contents)).convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise HTTPException(status_code=400, detail=f"Failed to read image: {e}")

        if max(image.size) > MAX_UPLOAD_DIMENSION:
            image.thumbnail((MAX_UPLOAD_DIMENSION, MAX_UPLOAD_DIMENSION))

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        img_base64 = base64.b64encode(buffer.getvalue()).decode()
        logger.info("Image upload decoded", width=image.size[0], height=image.size[1])

        return await svc.analyze_blood_panel_image(img_base64, "image/png")

    @app.post("/health-recommendations", response_model=HealthRecommendations)
    async def health_recommendations(
        request: HealthRecommendationsRequest,
        svc: HealthAnalysisService = Depends(get_service),
    ):
        return await svc.generate_health_recommendations(request.profile, request.blood_markers)

    @app.post("/image-consultation", response_model=ImageConsultationResponse)
    async def image_consultation(
        request: ImageConsultationRequest,
        svc: HealthAnalysisService = Depends(get_service),
    ):
        image_base64, mime_type = _checked_image(request.image_base64, request.mime_type)
        analysis = await svc.consult_on_image(
            image_base64, mime_type, sanitize_question(request.question)
        )
        return ImageConsultationResponse(analysis=analysis)

    return app


app = create_app()
