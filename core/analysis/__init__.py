from .report import NO_VOTES_TEXT, AnalysisResult, ElectionAnalyst, build_prompt

__all__ = [
    "NO_VOTES_TEXT",
    "AnalysisResult",
    "ElectionAnalyst",
    "build_prompt",
]
