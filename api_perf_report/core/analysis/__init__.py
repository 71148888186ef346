from .result_analyzer import AnalysisOutcome, ResultAnalyzer, summarize

__all__ = ["AnalysisOutcome", "ResultAnalyzer", "summarize"]
