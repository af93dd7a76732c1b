"""
Bots module - Agents that make decisions for a side.

Provides:
- Agent: Interface for decision-making
- RandomAgent, FirstLegalAgent: Baselines
- ScriptedAgent: Replays recorded choices
- HeuristicAgent, HeuristicEvaluator: Weighted state evaluation
"""

from .policy import (
    Agent, RandomAgent, FirstLegalAgent, ScriptedAgent, HeuristicAgent, make_agent,
)
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation

__all__ = [
    "Agent",
    "RandomAgent",
    "FirstLegalAgent",
    "ScriptedAgent",
    "HeuristicAgent",
    "make_agent",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
]
