"""Analysis engine contract and the rizin adapter."""

from .base import AnalysisData, Engine, EngineConfig, EngineFile, analysis_command
from .rizin import RizinEngine

__all__ = ["AnalysisData", "Engine", "EngineConfig", "EngineFile", "RizinEngine", "analysis_command"]
