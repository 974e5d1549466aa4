from .llm import LLMCriteriaEvaluator, parse_verdict

__all__ = ["LLMCriteriaEvaluator", "parse_verdict"]
