"""Pure rendering of card state into glyph descriptions for the browser."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel

from backdrop.logic.cards import Suit, ViewportClass

if TYPE_CHECKING:
    from backdrop.logic.cards import DecorativeCard

RED = "#dc2626"
BLACK = "#000000"

_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

# (width, height) in px
_CARD_SIZES = {
    ViewportClass.COMPACT: (40, 56),
    ViewportClass.REGULAR: (60, 84),
}


class CardGlyph(BaseModel):
    id: int
    left: str
    top: str
    transform: str
    width: str
    height: str
    rank: str
    symbol: str
    color: str


class BackgroundFrame(BaseModel):
    type: Literal["frame"] = "frame"
    viewport: ViewportClass
    cards: list[CardGlyph]


def suit_symbol(suit: Suit) -> str:
    return _SYMBOLS[suit]


def suit_color(suit: Suit) -> str:
    return RED if suit in {Suit.HEARTS, Suit.DIAMONDS} else BLACK


def card_size(viewport: ViewportClass) -> tuple[int, int]:
    return _CARD_SIZES[viewport]


def render_card(card: DecorativeCard, viewport: ViewportClass) -> CardGlyph:
    width, height = card_size(viewport)
    return CardGlyph(
        id=card.id,
        left=f"{card.x}%",
        top=f"{card.y}%",
        transform=f"rotate({card.rotation}deg)",
        width=f"{width}px",
        height=f"{height}px",
        rank=card.rank,
        symbol=suit_symbol(card.suit),
        color=suit_color(card.suit),
    )


def render_cards(cards: list[DecorativeCard], viewport: ViewportClass) -> BackgroundFrame:
    return BackgroundFrame(viewport=viewport, cards=[render_card(card, viewport) for card in cards])
