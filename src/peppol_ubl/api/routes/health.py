"""Health check endpoint."""

import importlib

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns service status and version.
    """
    from peppol_ubl import __version__

    return {
        "status": "healthy",
        "version": __version__,
        "service": "peppol-ubl",
    }


@router.get("/ready")
async def readiness_check() -> dict:
    """
    Readiness check endpoint.

    Verifies that the XML and MIME detection backends are importable.
    """
    checks = {
        "api": True,
        "lxml": _importable("lxml.etree"),
        "libmagic": _importable("magic"),
    }

    # libmagic is only needed for file-path attachments, which the API never reads
    all_ready = checks["api"] and checks["lxml"]

    return {
        "ready": all_ready,
        "checks": checks,
    }


def _importable(module: str) -> bool:
    try:
        importlib.import_module(module)
    except ImportError:
        return False
    return True
