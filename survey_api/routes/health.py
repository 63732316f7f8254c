"""Health check endpoint for monitoring and deployment verification.

This module provides a health check endpoint that verifies the application
is running and can connect to the database.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from survey_api.config import get_settings
from survey_api.logging_config import get_logger
from survey_api.models.database import get_db

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint.

    Verifies that:
    1. The application is running
    2. Database connection is working

    Returns:
        dict: Health check status with database connection info, or a 503
        error body if the database cannot be reached

    Example response:
        {
            "status": "healthy",
            "database": "connected",
            "version": "abc1234"
        }
    """
    try:
        # Test database connection with simple query
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service unavailable",
                "message": "Database connection failed"
            }
        )

    logger.debug("Health check passed")
    return {
        "status": "healthy",
        "database": "connected",
        "version": get_settings().git_commit_sha,
    }
