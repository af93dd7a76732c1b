"""
Heuristic Evaluator - Scores game states for agent decision-making.

The evaluator assigns a numeric score to game states based on:
- Victory points and instant wins
- Board features (battleground and regional control, influence spread)
- Threats (defcon, military operations shortfall)

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.action import ActionKind
from ..games.twilight.countries import NUM_COUNTRIES, Side
from ..games.twilight.scoring import REGION_VALUES, RegionStatus, status

if TYPE_CHECKING:
    from ..engine_core.encoder import DecodedChoice
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    vp: float = 10.0
    battleground_control: float = 6.0
    country_control: float = 2.0
    influence: float = 0.3
    region_status: float = 1.5  # Multiplied by the region's scoring value

    # Threats
    low_defcon: float = -25.0  # At defcon 2, for the phasing side
    mil_ops_shortfall: float = -4.0  # Per point below defcon


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by HeuristicAgent for 1-ply lookahead on influence choices:
    1. Copy the state
    2. Apply the candidate's influence change
    3. Evaluate the copy
    4. Pick the candidate leading to the best state
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, side: Side) -> StateEvaluation:
        """
        Evaluate a game state from side's perspective.

        Returns a positive score if the state is good for side.
        """
        w = self.weights
        sign = 1 if side == Side.US else -1
        opp = side.opposite()
        features: dict[str, float] = {}

        features["vp"] = w.vp * sign * state.vp

        bg = ctrl = 0
        spread = 0
        for c in range(NUM_COUNTRIES):
            country = state.countries[c]
            owner = country.controller()
            value = 1 if owner == side else -1 if owner == opp else 0
            if country.battleground:
                bg += value
            else:
                ctrl += value
            spread += country.influence(side) - country.influence(opp)
        features["battlegrounds"] = w.battleground_control * bg
        features["countries"] = w.country_control * ctrl
        features["influence"] = w.influence * spread

        regional = 0.0
        for region, values in REGION_VALUES.items():
            pair, _ = status(region, state)
            mine, theirs = pair[side], pair[opp]
            regional += _status_value(mine, values) - _status_value(theirs, values)
        features["regions"] = w.region_status * regional

        if state.defcon <= 2 and state.side == side:
            features["defcon"] = w.low_defcon
        shortfall = max(state.defcon - state.mil_ops[side], 0)
        features["mil_ops"] = w.mil_ops_shortfall * shortfall

        total = sum(features.values())
        if state.winner == side:
            total += 1000
        elif state.winner == opp:
            total -= 1000

        return StateEvaluation(total_score=total, feature_breakdown=features)

    def evaluate_choice(self, state: GameState, side: Side, choice: DecodedChoice) -> float:
        """
        Score a candidate choice.

        Influence placements and removals are applied to a copy and the
        result evaluated; other kinds fall back to a static preference.
        """
        kind = choice.kind
        if kind in (ActionKind.STANDARD_OPS, ActionKind.PLACE):
            after = state.clone()
            after.add_influence(side, choice.choice, 1)
            return self.evaluate(after, side).total_score
        if kind == ActionKind.REMOVE:
            after = state.clone()
            after.remove_influence(side.opposite(), choice.choice, 1)
            return self.evaluate(after, side).total_score
        base = self.evaluate(state, side).total_score
        return base + KIND_PREFERENCE.get(kind, 0.0)


# Static tie-breakers for choices the evaluator does not simulate
KIND_PREFERENCE: dict[ActionKind, float] = {
    ActionKind.PLAY_CARD: 2.0,
    ActionKind.STANDARD_OPS: 1.0,
    ActionKind.REALIGNMENT: -1.0,
    ActionKind.COUP: 0.5,
    ActionKind.SPACE: 0.0,
    ActionKind.MISSILE_CRISIS: 5.0,
    ActionKind.PASS: -5.0,
}


def _status_value(st: RegionStatus, values: tuple[int, int, int]) -> float:
    if st == RegionStatus.NONE:
        return 0.0
    return float(values[st - 1])
