from backdrop.logic.cards import DecorativeCard, Suit, ViewportClass
from backdrop.logic.render import BLACK, RED, card_size, render_card, render_cards, suit_color, suit_symbol


def _card(suit: Suit = Suit.HEARTS) -> DecorativeCard:
    return DecorativeCard(
        id=4,
        x=12.5,
        y=-10.0,
        rotation=45.0,
        suit=suit,
        rank="10",
        speed=0.1,
        rotation_speed=-0.1,
    )


class TestSuitGlyphs:
    def test_symbols(self):
        assert [suit_symbol(s) for s in Suit] == ["♥", "♦", "♣", "♠"]

    def test_red_and_black_suits(self):
        assert suit_color(Suit.HEARTS) == RED
        assert suit_color(Suit.DIAMONDS) == RED
        assert suit_color(Suit.CLUBS) == BLACK
        assert suit_color(Suit.SPADES) == BLACK


class TestRenderCard:
    def test_position_and_transform(self):
        glyph = render_card(_card(), ViewportClass.REGULAR)
        assert glyph.id == 4
        assert glyph.left == "12.5%"
        assert glyph.top == "-10.0%"
        assert glyph.transform == "rotate(45.0deg)"
        assert glyph.rank == "10"
        assert glyph.symbol == "♥"
        assert glyph.color == RED

    def test_size_follows_viewport(self):
        assert card_size(ViewportClass.COMPACT) == (40, 56)
        compact = render_card(_card(), ViewportClass.COMPACT)
        regular = render_card(_card(), ViewportClass.REGULAR)
        assert (compact.width, compact.height) == ("40px", "56px")
        assert (regular.width, regular.height) == ("60px", "84px")

    def test_rendering_is_deterministic(self):
        card = _card(Suit.CLUBS)
        assert render_card(card, ViewportClass.COMPACT) == render_card(card, ViewportClass.COMPACT)


class TestRenderCards:
    def test_frame_is_json_ready(self):
        frame = render_cards([_card(), _card(Suit.SPADES)], ViewportClass.COMPACT)
        payload = frame.model_dump(mode="json")
        assert payload["type"] == "frame"
        assert payload["viewport"] == "compact"
        assert [c["symbol"] for c in payload["cards"]] == ["♥", "♠"]
