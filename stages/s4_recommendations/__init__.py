from .recommendation_gate import RecommendationGate

__all__ = ["RecommendationGate"]
