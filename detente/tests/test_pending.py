"""
Tests for the pending-decision stack and interpreter.

Tests:
- Stack ordering and bookkeeping markers
- Repeated decisions (quantity placement)
- Meta kinds collapsing to concrete kinds
- Trivial decisions resolved without the agent
- The Cuban Missile Crisis interrupt
"""

import pytest

from ..bots.policy import FirstLegalAgent, ScriptedAgent
from ..engine_core.action import ActionKind, Allowed, Decision
from ..engine_core.errors import IllegalChoice
from ..engine_core.pending import PendingStack
from ..engine_core.random_source import ScriptedRandom
from ..games.twilight.countries import EASTERN_EUROPE, CName, Side
from ..games.twilight.effects import Effect
from .conftest import flat, run


class TestPendingStack:
    """Tests for PendingStack."""

    def test_extend_resolves_first_item_first(self):
        """Extended decisions sit above earlier pushes."""
        second = Decision.conduct_ops(Side.USSR, 2)
        stack = PendingStack()
        stack.push(Decision.conduct_ops(Side.US, 1))
        stack.extend([second])
        assert stack.peek() is second

    def test_event_gets_clear_marker(self):
        """An EVENT is pushed above a CLEAR_EVENT marker."""
        stack = PendingStack([Decision(agent=Side.US, action=ActionKind.EVENT)])
        kinds = [d.action for d in stack.snapshot()]
        assert kinds == [ActionKind.EVENT, ActionKind.CLEAR_EVENT]

    def test_begin_round_gets_end_marker(self):
        """A BEGIN_ROUND is pushed above an END_ROUND marker."""
        stack = PendingStack([Decision.begin_round(Side.US)])
        assert stack.pop().action == ActionKind.BEGIN_ROUND
        marker = stack.pop()
        assert marker.action == ActionKind.END_ROUND
        assert marker.agent == Side.NEUTRAL
        assert not stack

    def test_pop_empty(self):
        """Popping an empty stack raises IndexError."""
        with pytest.raises(IndexError):
            PendingStack().pop()


class TestQuantityPlacement:
    """A quantity-6 placement resolves as six single placements."""

    def test_setup_placement(self, state, make_interpreter):
        """Six placements split between two countries."""
        picks = [CName.Poland] * 3 + [CName.EGermany] * 3
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.PLACE, c) for c in picks])
        interpreter = make_interpreter(state, {Side.USSR: agent})

        run(interpreter, Decision.place(Side.USSR, Allowed.fixed(EASTERN_EUROPE), 6))

        assert state.influence(Side.USSR, CName.Poland) == 3
        assert state.influence(Side.USSR, CName.EGermany) == 6
        assert len(interpreter.history) == 6
        assert agent.remaining() == 0

    def test_max_per_country(self, state, make_interpreter):
        """A per-country cap spreads placements."""
        agent = FirstLegalAgent(Side.USSR)
        interpreter = make_interpreter(state, {Side.USSR: agent})
        targets = [int(CName.Poland), int(CName.Hungary), int(CName.Romania)]

        run(interpreter, Decision.place(
            Side.USSR, Allowed.computed(targets), 3, max_per_country=1,
        ))

        for c in targets:
            assert state.influence(Side.USSR, c) == 1

    def test_choice_not_offered(self, state, make_interpreter):
        """Choosing outside the candidates raises IllegalChoice."""
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.PLACE, CName.UK)])
        interpreter = make_interpreter(state, {Side.USSR: agent})
        with pytest.raises(IllegalChoice):
            run(interpreter, Decision.place(Side.USSR, Allowed.fixed(EASTERN_EUROPE), 2))


class TestCollapse:
    """Conduct-ops collapsed to a coup."""

    def test_coup_from_conduct_ops(self, state, make_interpreter):
        """Operations collapse to a coup with the full ops value."""
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.COUP, CName.Iran)])
        rng = ScriptedRandom(ussr_rolls=[4])
        interpreter = make_interpreter(state, {Side.USSR: agent}, rng)

        run(interpreter, Decision.conduct_ops(Side.USSR, 3))

        # 4 + 3 - 2 * 2 = 3: one US influence removed, two USSR added
        assert state.influence(Side.US, CName.Iran) == 0
        assert state.influence(Side.USSR, CName.Iran) == 2
        assert state.mil_ops[Side.USSR] == 3
        # Battleground coup
        assert state.defcon == 4
        kinds = [c.kind for c in interpreter.history]
        assert kinds == [ActionKind.COUP, ActionKind.CHANGE_DEFCON]

    def test_failed_coup_still_counts_mil_ops(self, state, make_interpreter):
        """A failed coup still counts military ops."""
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.COUP, CName.Iran)])
        interpreter = make_interpreter(state, {Side.USSR: agent}, ScriptedRandom(ussr_rolls=[1]))

        run(interpreter, Decision.conduct_ops(Side.USSR, 2))

        assert state.influence(Side.US, CName.Iran) == 1
        assert state.mil_ops[Side.USSR] == 2

    def test_standard_ops_from_conduct_ops(self, state, make_interpreter):
        """Operations collapse to repeated placements."""
        picks = [CName.Iraq, CName.Iraq]
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.STANDARD_OPS, c) for c in picks])
        interpreter = make_interpreter(state, {Side.USSR: agent})

        run(interpreter, Decision.conduct_ops(Side.USSR, 2))

        assert state.influence(Side.USSR, CName.Iraq) == 3
        assert agent.remaining() == 0


class TestTrivialDecisions:
    """Single-candidate decisions never reach the agent."""

    def test_resolves_without_agent(self, state, make_interpreter):
        """Forced placements need no agent."""
        interpreter = make_interpreter(state, {})
        run(interpreter, Decision.place(Side.USSR, Allowed.computed([int(CName.Poland)]), 2))
        assert state.influence(Side.USSR, CName.Poland) == 2
        assert [c.kind for c in interpreter.history] == [ActionKind.PLACE] * 2

    def test_scripted_agent_drops_forced_moves(self, state, make_interpreter):
        """A recorded forced move is consumed from the script."""
        index = flat(ActionKind.PLACE, CName.Poland)
        agent = ScriptedAgent(Side.USSR, [index, flat(ActionKind.PASS)])
        interpreter = make_interpreter(state, {Side.USSR: agent})

        run(interpreter, Decision.place(Side.USSR, Allowed.computed([int(CName.Poland)])))

        assert agent.remaining() == 1
        assert list(agent.queue) == [flat(ActionKind.PASS)]

    def test_bookkeeping_needs_no_agent(self, state, make_interpreter):
        """DEFCON changes resolve without an agent."""
        interpreter = make_interpreter(state, {})
        run(interpreter, Decision.change_defcon(Side.US, 2))
        assert state.defcon == 3


class TestMissileCrisisInterrupt:
    """The interrupt is offered before ops, once per side per resolution."""

    @pytest.fixture
    def crisis(self, state):
        state.add_effect(Side.USSR, Effect.CUBAN_MISSILE_CRISIS)
        state.add_influence(Side.USSR, CName.Cuba, 2)
        return state

    def test_offered_once(self, crisis, make_interpreter):
        """The interrupt precedes operations and is declined once."""
        agent = ScriptedAgent(Side.USSR, [
            flat(ActionKind.PASS),
            flat(ActionKind.STANDARD_OPS, CName.Cuba),
            flat(ActionKind.STANDARD_OPS, CName.Cuba),
        ])
        interpreter = make_interpreter(crisis, {Side.USSR: agent})

        run(interpreter, Decision.conduct_ops(Side.USSR, 2))

        kinds = [c.kind for c in interpreter.history]
        assert kinds == [ActionKind.PASS, ActionKind.STANDARD_OPS, ActionKind.STANDARD_OPS]
        assert crisis.influence(Side.USSR, CName.Cuba) == 4
        assert crisis.has_effect(Side.USSR, Effect.CUBAN_MISSILE_CRISIS)

    def test_offered_once_across_queued_decisions(self, crisis, make_interpreter):
        """Two operations decisions in one resolution see a single interrupt."""
        agent = ScriptedAgent(Side.USSR, [
            flat(ActionKind.PASS),
            flat(ActionKind.STANDARD_OPS, CName.Cuba),
            flat(ActionKind.STANDARD_OPS, CName.Cuba),
        ])
        interpreter = make_interpreter(crisis, {Side.USSR: agent})

        run(interpreter, Decision.conduct_ops(Side.USSR, 1), Decision.conduct_ops(Side.USSR, 1))

        kinds = [c.kind for c in interpreter.history]
        assert kinds == [ActionKind.PASS, ActionKind.STANDARD_OPS, ActionKind.STANDARD_OPS]
        assert kinds.count(ActionKind.MISSILE_CRISIS) + kinds.count(ActionKind.PASS) == 1
        assert agent.remaining() == 0

    def test_defusing_allows_coups(self, crisis, make_interpreter):
        """Defusing the crisis reopens coups."""
        agent = ScriptedAgent(Side.USSR, [
            flat(ActionKind.MISSILE_CRISIS, CName.Cuba),
            flat(ActionKind.COUP, CName.Iran),
        ])
        rng = ScriptedRandom(ussr_rolls=[6])
        interpreter = make_interpreter(crisis, {Side.USSR: agent}, rng)

        run(interpreter, Decision.conduct_ops(Side.USSR, 2))

        assert crisis.influence(Side.USSR, CName.Cuba) == 0
        assert not crisis.has_effect(Side.USSR, Effect.CUBAN_MISSILE_CRISIS)
        assert crisis.influence(Side.USSR, CName.Iran) == 3
        assert crisis.mil_ops[Side.USSR] == 2

    def test_not_offered_without_targets(self, state, make_interpreter):
        """No interrupt without influence to give up."""
        state.add_effect(Side.USSR, Effect.CUBAN_MISSILE_CRISIS)
        agent = ScriptedAgent(Side.USSR, [flat(ActionKind.STANDARD_OPS, CName.Iraq)])
        interpreter = make_interpreter(state, {Side.USSR: agent})

        run(interpreter, Decision.conduct_ops(Side.USSR, 1))

        assert [c.kind for c in interpreter.history] == [ActionKind.STANDARD_OPS]

    def test_listeners_see_every_choice(self, state, make_interpreter):
        """Listeners are notified after each choice."""
        seen = []
        interpreter = make_interpreter(state, {})
        interpreter.listeners.append(lambda i: seen.append(len(i.history)))
        run(interpreter, Decision.place(Side.USSR, Allowed.computed([int(CName.Poland)]), 3))
        assert seen == [1, 2, 3]
