"""
Agent Policy - Interface for decision-making.

An Agent is handed the encoded candidates of a pending decision and returns
one of them as a decoded (kind, choice) pair. Agents never mutate the game
state; the interpreter applies whatever they choose.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, Iterable

from ..engine_core.encoder import DecodedChoice, decode
from ..engine_core.errors import ScriptExhausted
from ..games.twilight.countries import Side
from .evaluator import HeuristicEvaluator

if TYPE_CHECKING:
    from ..engine_core.state import GameState


class Agent(ABC):
    """
    Abstract base class for agents.

    One agent plays one side. Implementations range from scripted replays
    to random baselines and heuristic search.
    """

    def __init__(self, side: Side):
        self._side = side

    @property
    def side(self) -> Side:
        return self._side

    @abstractmethod
    def decide(self, state: GameState, candidates: list[int]) -> DecodedChoice:
        """
        Select one of the candidate flat indices.

        Args:
            state: Current game state (read-only)
            candidates: Encoded flat indices, at least two of them

        Returns:
            The chosen candidate, decoded
        """
        pass

    def evaluate(self, state: GameState) -> float:
        """Scalar value of state for this agent's side."""
        return float(state.vp if self._side == Side.US else -state.vp)

    def trivial_action(self, index: int) -> bool:
        """
        Notified when the interpreter resolves a decision without asking.

        Returns True if the agent consumed the index from its own queue.
        """
        return False


class RandomAgent(Agent):
    """
    Random agent - selects candidates uniformly at random.

    Used for:
    - Testing
    - Self-play baselines
    """

    def __init__(self, side: Side, seed: int | None = None):
        super().__init__(side)
        self.rng = random.Random(seed)

    def decide(self, state: GameState, candidates: list[int]) -> DecodedChoice:
        if not candidates:
            raise ValueError("No candidates available")
        return decode(self.rng.choice(candidates))


class FirstLegalAgent(Agent):
    """
    First-legal agent - always selects the first candidate.

    Used for deterministic testing.
    """

    def decide(self, state: GameState, candidates: list[int]) -> DecodedChoice:
        if not candidates:
            raise ValueError("No candidates available")
        return decode(candidates[0])


class ScriptedAgent(Agent):
    """
    Replays a queue of flat indices.

    Forced moves need not be recorded: when the interpreter resolves a
    trivial decision to the index at the head of the queue, the index is
    dropped via trivial_action().
    """

    def __init__(self, side: Side, choices: Iterable[int] = ()):
        super().__init__(side)
        self.queue: deque[int] = deque(choices)

    def decide(self, state: GameState, candidates: list[int]) -> DecodedChoice:
        if not self.queue:
            raise ScriptExhausted(f"Scripted choices for {self.side.name} ran out")
        return decode(self.queue.popleft())

    def trivial_action(self, index: int) -> bool:
        if self.queue and self.queue[0] == index:
            self.queue.popleft()
            return True
        return False

    def remaining(self) -> int:
        return len(self.queue)


class HeuristicAgent(Agent):
    """
    Heuristic agent - scores each candidate and takes the best.

    Ties go to the earliest candidate, so play is deterministic.
    """

    def __init__(self, side: Side, evaluator: HeuristicEvaluator | None = None):
        super().__init__(side)
        self.evaluator = evaluator or HeuristicEvaluator()

    def decide(self, state: GameState, candidates: list[int]) -> DecodedChoice:
        if not candidates:
            raise ValueError("No candidates available")
        best, best_score = None, float("-inf")
        for index in candidates:
            choice = decode(index)
            score = self.evaluator.evaluate_choice(state, self.side, choice)
            if score > best_score:
                best, best_score = choice, score
        return best

    def evaluate(self, state: GameState) -> float:
        return self.evaluator.evaluate(state, self.side).total_score


AGENT_TYPES = {
    "random": RandomAgent,
    "first": FirstLegalAgent,
    "heuristic": HeuristicAgent,
}


def make_agent(name: str, side: Side, seed: int | None = None) -> Agent:
    """Build an agent by its CLI/API name."""
    if name == "random":
        return RandomAgent(side, seed)
    if name not in AGENT_TYPES:
        raise ValueError(f"Unknown agent type: {name}")
    return AGENT_TYPES[name](side)
