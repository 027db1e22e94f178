import logging
import random

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from signmirror.comparator import compare_motion
from signmirror.config import settings
from signmirror.feedback import generate_feedback
from signmirror.models import CompareRequest, CompareResponse

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/compare", response_model=CompareResponse)
def compare(request: CompareRequest):
    live_count = len(request.live_frames)
    ref_count = len(request.reference.frames)
    if max(live_count, ref_count) > settings.max_frames:
        raise HTTPException(
            status_code=413,
            detail=f"Too many frames (live={live_count}, reference={ref_count}, max={settings.max_frames})",
        )

    result = compare_motion(request.live_frames, request.reference.frames)
    rng = random.Random(request.seed) if request.seed is not None else None
    feedback = generate_feedback(result, rng)
    logger.info("Compared attempt: score=%d, tier=%s", result.score, feedback.tier)
    return CompareResponse(result=result, feedback=feedback)
