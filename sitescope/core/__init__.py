"""Core modules for SiteScope's scanning and analysis pipeline."""

from .analyzer import SiteAnalyzer, compute_health_score, summarize
from .components import ComponentClassifier
from .dependencies import DependencyExtractor
from .graph import GraphAnalyzer
from .issues import IssueDetector
from .metrics import MetricsCalculator
from .models import AnalysisResult, AnalysisSummary, FileCategory, WalkedFile
from .scanner import ProjectScanner
from .walker import SourceWalker

__all__ = [
    "SiteAnalyzer",
    "compute_health_score",
    "summarize",
    "ComponentClassifier",
    "DependencyExtractor",
    "GraphAnalyzer",
    "IssueDetector",
    "MetricsCalculator",
    "AnalysisResult",
    "AnalysisSummary",
    "FileCategory",
    "WalkedFile",
    "ProjectScanner",
    "SourceWalker",
]
