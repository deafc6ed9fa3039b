"""
Search term optimizer — classifies search term performance into bid and
negative-keyword actions.
"""
from .config import DEFAULT_PARAMETERS, AnalysisConfig, ConfigError, load_analysis_config
from .engine import classify_record, run_analysis, summarize
from .models import AnalysisSummary, ClassificationResult, SearchTermRecord, Suggestion
from .tokenizer import split_to_feature_words

__all__ = [
    "DEFAULT_PARAMETERS",
    "AnalysisConfig",
    "AnalysisSummary",
    "ClassificationResult",
    "ConfigError",
    "SearchTermRecord",
    "Suggestion",
    "classify_record",
    "load_analysis_config",
    "run_analysis",
    "split_to_feature_words",
    "summarize",
]
