"""Routes package for FastAPI endpoints.

This package contains all API route modules for the Survey API.
"""

from survey_api.routes import auth, company_admin, health, responses, super_admin, surveys

__all__ = ["auth", "company_admin", "health", "responses", "super_admin", "surveys"]
