"""Service layer modules for the CareerHub API."""

from . import auth_service, openai_service, pdf_service, prompt_service, resource_service, search_service

__all__ = [
    "auth_service",
    "openai_service",
    "pdf_service",
    "prompt_service",
    "resource_service",
    "search_service",
]
