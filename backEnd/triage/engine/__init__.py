"""Analysis engines, decision policy and the analyze entry point."""

from .base import BaseEngine, EngineRun
from .duplicate import DuplicateEngine
from .policy import DecisionPolicy
from .quality import QualityEngine
from .service import TriageService, build_service, validate_repository

__all__ = [
    "BaseEngine",
    "EngineRun",
    "DuplicateEngine",
    "DecisionPolicy",
    "QualityEngine",
    "TriageService",
    "build_service",
    "validate_repository",
]
