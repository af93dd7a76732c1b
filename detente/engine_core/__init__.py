"""
Engine Core - The decision-resolution engine.

The engine is the runtime that:
1. Lays every kind of choice out in one flat action space
2. Encodes pending decisions against live state
3. Resolves decisions trivially or through agents
4. Applies choices via the reducer
5. Supplies randomness for real play and scripted replay
"""

from .errors import (
    EngineError, OutOfRange, IllegalChoice, EmptyAllowedSet,
    RandomnessExhausted, ReshuffleMismatch, ScriptExhausted,
)
from .action import (
    ActionKind, ActionCatalog, Allowed, AllowedType, Decision, EventTime,
    get_catalog, arity, offset, locate, total_size,
)
from .state import GameState, CountryState
from .encoder import DecodedChoice, encode, decode, encode_single, is_trivial
from .random_source import RandomSource, InternalRandom, ScriptedRandom
from .reducer import Reducer
from .pending import PendingStack, Interpreter

__all__ = [
    "EngineError",
    "OutOfRange",
    "IllegalChoice",
    "EmptyAllowedSet",
    "RandomnessExhausted",
    "ReshuffleMismatch",
    "ScriptExhausted",
    "ActionKind",
    "ActionCatalog",
    "Allowed",
    "AllowedType",
    "Decision",
    "EventTime",
    "get_catalog",
    "arity",
    "offset",
    "locate",
    "total_size",
    "GameState",
    "CountryState",
    "DecodedChoice",
    "encode",
    "decode",
    "encode_single",
    "is_trivial",
    "RandomSource",
    "InternalRandom",
    "ScriptedRandom",
    "Reducer",
    "PendingStack",
    "Interpreter",
]
