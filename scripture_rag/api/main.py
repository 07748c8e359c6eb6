"""
FastAPI Application - Scripture RAG

Main entry point for the REST API.
"""

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import logging
import os
import time
from typing import AsyncGenerator

from dotenv import load_dotenv

from .. import __version__ as VERSION
from ..rag.retriever import RetrievalService
from .dependencies import get_retrieval_service, shutdown_services
from .schemas import ErrorResponse, HealthResponse

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan events.

    The vector store connects lazily on the first request; shutdown closes it.
    """
    logger.info("=" * 60)
    logger.info(f"Scripture RAG API v{VERSION}")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down API...")
    shutdown_services()


app = FastAPI(
    title="Scripture RAG API",
    description="""
    Retrieval-augmented grounding for a spiritual-guidance assistant.

    ## Features
    - Semantic search over the Vachanamrut, Swamini Vato and Shikshapatri
    - System prompt composition with retrieved passages
    - Grounded chat answers in English or Gujarati
    """,
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests"""
    start_time = time.time()
    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = (time.time() - start_time) * 1000
    logger.info(f"← {response.status_code} ({duration:.0f}ms)")
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    errors = exc.errors()
    logger.warning(f"Validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            detail=f"Validation error: {errors[0]['msg']}",
            error_code="VALIDATION_ERROR"
        ).model_dump(mode='json')
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            detail="Internal server error. Please try again later.",
            error_code="INTERNAL_ERROR"
        ).model_dump(mode='json')
    )


@app.get("/", tags=["Root"])
async def root():
    return {
        "name": "Scripture RAG API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(retrieval_service: RetrievalService = Depends(get_retrieval_service)):
    """
    Health check endpoint.

    Always reports the API as healthy; the vector store status is informational.
    """
    vector_store_status = "disconnected"
    indexed_chunks = None
    try:
        indexed_chunks = retrieval_service.vector_store.count()
        vector_store_status = "connected"
    except Exception as e:
        logger.error(f"Health check vector store error: {e}")

    return HealthResponse(
        status="healthy",
        vector_store=vector_store_status,
        indexed_chunks=indexed_chunks,
        version=VERSION
    )


from .routers import chat, rag

app.include_router(rag.router, prefix="/api/v1", tags=["RAG"])
app.include_router(chat.router, prefix="/api/v1", tags=["Chat"])


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(
        "scripture_rag.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info"
    )
