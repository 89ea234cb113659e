"""
Main API application
"""

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.exam_api import router as exam_router
from api.randomization_api import router as randomization_router
from api.proctoring_api import router as proctoring_router
from api.attempt_api import router as attempt_router
from api.shared import load_question_bank

logging.basicConfig(
    level=config.settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup và shutdown events"""
    logger.info("Starting server...")

    if os.path.exists(config.settings.QUESTION_BANK_FILE):
        try:
            bank = load_question_bank()
            total = sum(len(questions) for questions in bank.values())
            logger.info("Loaded %d questions for %d assignments", total, len(bank))
        except Exception:
            logger.exception("Error loading question bank")
            raise
    else:
        logger.info(
            "Question bank %s not found, questions must be sent with each request",
            config.settings.QUESTION_BANK_FILE
        )

    yield

    logger.info("Shutting down server...")


app = FastAPI(
    title="Exam Randomization & Proctoring API",
    description="API xáo đề theo học sinh và tổng hợp log chống gian lận",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(exam_router)
app.include_router(randomization_router)
app.include_router(proctoring_router)
app.include_router(attempt_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Exam Randomization & Proctoring API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
