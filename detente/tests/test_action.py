"""
Tests for the action catalog and decisions.

Tests:
- Offset table layout
- Flat index round trips
- Special event sub-offsets
- Decision construction
"""

import pytest

from ..engine_core.action import (
    ActionKind, Allowed, AllowedType, Decision, build_offsets, get_catalog,
    locate, offset, total_size,
)
from ..engine_core.encoder import DecodedChoice, decode, encode_single
from ..engine_core.errors import OutOfRange
from ..games.twilight.cards import NUM_CARD_SLOTS, Card
from ..games.twilight.countries import NUM_COUNTRIES, Side


class TestOffsets:
    """Tests for the offset table."""

    def test_build_offsets(self):
        """Offsets are running sums of the preceding arities."""
        assert build_offsets([3, 0, 5, 2]) == (0, 3, 3, 8)

    def test_offsets_increase_by_arity(self):
        """Each offset is the previous offset plus the previous arity."""
        catalog = get_catalog()
        for i in range(1, len(catalog.kinds)):
            assert catalog.offsets[i] == catalog.offsets[i - 1] + catalog.arities[i - 1]

    def test_total_size(self):
        """The flat space is as large as all arities combined."""
        catalog = get_catalog()
        assert total_size() == sum(catalog.arities)

    def test_meta_kinds_have_no_choices(self):
        """Meta kinds occupy no room in the flat space."""
        catalog = get_catalog()
        assert catalog.arity(ActionKind.BEGIN_ROUND) == 0
        assert catalog.arity(ActionKind.CONDUCT_OPS) == 0

    def test_arities(self):
        """Arities follow the card and country tables."""
        catalog = get_catalog()
        assert catalog.arity(ActionKind.PLAY_CARD) == NUM_CARD_SLOTS * 3
        assert catalog.arity(ActionKind.COUP) == NUM_COUNTRIES
        assert catalog.arity(ActionKind.EVENT) == NUM_CARD_SLOTS
        assert catalog.arity(ActionKind.SPECIAL_EVENT) == 2 + 2 + 2 + 5
        assert catalog.arity(ActionKind.PASS) == 1

    def test_catalog_is_shared(self):
        """The catalog is built once per process."""
        assert get_catalog() is get_catalog()


class TestRoundTrip:
    """Tests for decode/encode of every kind."""

    def test_every_local_choice_round_trips(self):
        """Every local choice of every kind survives encode then decode."""
        catalog = get_catalog()
        for kind in catalog.kinds:
            for choice in range(catalog.arity(kind)):
                index = encode_single(kind, choice)
                assert index is not None
                assert decode(index) == DecodedChoice(kind, choice)

    def test_every_flat_index_decodes(self):
        """Every flat index decodes to a kind and local choice."""
        for index in range(total_size()):
            kind, local = locate(index)
            assert offset(kind) + local == index

    def test_zero_arity_kinds_never_decode(self):
        """No flat index decodes to a meta kind."""
        decoded = {locate(i)[0] for i in range(total_size())}
        assert ActionKind.BEGIN_ROUND not in decoded
        assert ActionKind.CONDUCT_OPS not in decoded

    def test_out_of_range(self):
        """Indices outside the space raise OutOfRange."""
        with pytest.raises(OutOfRange):
            decode(total_size())
        with pytest.raises(OutOfRange):
            decode(-1)

    def test_encode_single_rejects_bad_choice(self):
        """Choices outside a kind's arity encode to None."""
        assert encode_single(ActionKind.PASS, 1) is None
        assert encode_single(ActionKind.BEGIN_ROUND, 0) is None
        assert encode_single(ActionKind.COUP, -1) is None


class TestSpecialEvents:
    """Tests for the SPECIAL_EVENT sub-table."""

    def test_sub_offsets_in_card_order(self):
        """Branching cards are packed end to end in card order."""
        catalog = get_catalog()
        assert catalog.special_offset(Card.Blockade) == 0
        assert catalog.special_offset(Card.Warsaw_Pact_Formed) == 2
        assert catalog.special_offset(Card.Olympic_Games) == 4
        assert catalog.special_offset(Card.Independent_Reds) == 6

    def test_locate_special(self):
        """A SPECIAL_EVENT local choice maps back to card and option."""
        catalog = get_catalog()
        assert catalog.locate_special(5) == (Card.Olympic_Games, 1)
        assert catalog.locate_special(10) == (Card.Independent_Reds, 4)
        with pytest.raises(OutOfRange):
            catalog.locate_special(11)

    def test_card_without_branches(self):
        """A card with a single event has no sub-offset."""
        with pytest.raises(ValueError):
            get_catalog().special_offset(Card.Fidel)


class TestDecision:
    """Tests for Decision construction."""

    def test_quantity_must_be_positive(self):
        """A decision must repeat at least once."""
        with pytest.raises(ValueError):
            Decision(agent=Side.US, action=ActionKind.PLACE, quantity=0)

    def test_event_agent_is_card_owner(self):
        """The card's owner resolves its event."""
        decision = Decision.event(Card.Duck_and_Cover, Side.USSR)
        assert decision.agent == Side.US
        assert list(decision.allowed.view()) == [int(Card.Duck_and_Cover)]

    def test_neutral_event_needs_side(self):
        """Neutral cards need the acting side."""
        with pytest.raises(ValueError):
            Decision.event(Card.Olympic_Games)
        assert Decision.event(Card.Olympic_Games, Side.US).agent == Side.US

    def test_remove_targets_side(self):
        """Remove decisions record whose influence is removed."""
        decision = Decision.remove(Side.USSR, Side.US, Allowed.computed([1]), 2, all=True)
        assert decision.params == {"side": Side.US, "all": True}
        assert decision.quantity == 2

    def test_repeated_copies_params(self):
        """A repetition gets its own params dict."""
        decision = Decision.place(Side.US, Allowed.fixed((1, 2)), 3, max_per_country=1)
        nxt = decision.repeated()
        nxt.params["extra"] = True
        assert nxt.quantity == 2
        assert "extra" not in decision.params

    def test_allowed_types(self):
        """Allowed sets report their type, length and membership."""
        assert Allowed.empty().type == AllowedType.EMPTY
        assert Allowed.empty().is_empty()
        allowed = Allowed.fixed((4, 5))
        assert 5 in allowed
        assert len(allowed) == 2
