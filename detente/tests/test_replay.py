"""
Tests for replaying recorded games.

Tests:
- Scripted setup with checks at history positions
- End of record versus a script that ran out early
"""

import pytest

from ..bots.policy import ScriptedAgent
from ..engine_core.action import ActionKind
from ..engine_core.errors import ReshuffleMismatch, ScriptExhausted
from ..engine_core.random_source import ScriptedRandom
from ..games.twilight.cards import EARLY_WAR
from ..games.twilight.countries import CName, Side
from ..session.replay import Replay
from .conftest import flat

USSR_SETUP = [CName.Poland] * 4 + [CName.EGermany] * 2
US_SETUP = [CName.WGermany] * 4 + [CName.Italy] * 3


def scripted(side, countries, extra=()):
    return ScriptedAgent(side, [flat(ActionKind.PLACE, c) for c in countries] + list(extra))


class TestReplay:

    def make(self, us_extra=()):
        return Replay(
            scripted(Side.US, US_SETUP, us_extra),
            scripted(Side.USSR, USSR_SETUP),
            ScriptedRandom(shuffle_orders=[list(EARLY_WAR)]),
        )

    def test_setup_with_checks(self):
        """Checks run at their history positions."""
        replay = self.make()
        seen = {}

        def after_ussr(r):
            seen["poland"] = r.state.influence(Side.USSR, CName.Poland)
            seen["us_wgermany"] = r.state.influence(Side.US, CName.WGermany)

        def after_us(r):
            seen["italy"] = r.state.influence(Side.US, CName.Italy)

        replay.add_check(6, after_ussr)
        replay.add_check(13, after_us)

        assert replay.play() is None

        assert seen == {"poland": 4, "us_wgermany": 0, "italy": 3}
        assert replay.checks_run == 2
        assert replay.finished()
        assert len(replay.state.deck.ussr_hand) == 8

    def test_dealt_from_recorded_order(self):
        """Hands are dealt from the recorded shuffle."""
        replay = self.make()
        replay.play()
        # Drawn from the end, USSR first
        assert replay.state.deck.ussr_hand[0] == EARLY_WAR[-1]
        assert replay.state.deck.us_hand[0] == EARLY_WAR[-2]

    def test_one_script_left_over(self):
        """A script left over when the other runs out is an error."""
        replay = self.make(us_extra=[flat(ActionKind.PASS)])
        with pytest.raises(ScriptExhausted):
            replay.play()

    def test_bad_shuffle_order(self):
        """A recorded shuffle must match the deck."""
        replay = Replay(
            scripted(Side.US, US_SETUP),
            scripted(Side.USSR, USSR_SETUP),
            ScriptedRandom(shuffle_orders=[list(EARLY_WAR)[1:]]),
        )
        with pytest.raises(ReshuffleMismatch):
            replay.play()
