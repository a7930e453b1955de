"""
Decorative playing cards that drift down the page background.

Each card is an immutable snapshot. A tick maps every card to its next
snapshot independently of the others: it falls by its own speed and spins by
its own rotation speed. A card that drops below the viewport is recycled in
place (same id, same speeds) just above the top edge at a new horizontal
position and angle. The collection never grows or shrinks between ticks.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    import random


class Suit(str, Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class ViewportClass(str, Enum):
    COMPACT = "compact"
    REGULAR = "regular"


RANKS: tuple[str, ...] = ("A", "K", "Q", "J", "10", "9", "8", "7", "6")
SUITS: tuple[Suit, ...] = tuple(Suit)

# Widths at or below the breakpoint render the compact layout (max-width: 768px).
COMPACT_BREAKPOINT_PX = 768
COMPACT_CARD_COUNT = 10
REGULAR_CARD_COUNT = 20

# Positions are percentages of the viewport.
LOWER_BOUND = 100.0
RECYCLE_Y = -10.0
FULL_TURN = 360.0

MIN_SPEED = 0.05
SPEED_SPREAD = 0.1
ROTATION_SPEED_SPREAD = 0.5

TICK_INTERVAL_SECONDS = 0.05


class DecorativeCard(BaseModel, frozen=True):
    id: int
    x: float
    y: float
    rotation: float
    suit: Suit
    rank: str
    speed: float  # percent of viewport height per tick
    rotation_speed: float  # degrees per tick, signed


def viewport_class_for_width(width: int, breakpoint_px: int = COMPACT_BREAKPOINT_PX) -> ViewportClass:
    """Classify a reported display width against the breakpoint."""
    return ViewportClass.COMPACT if width <= breakpoint_px else ViewportClass.REGULAR


def card_count(viewport: ViewportClass) -> int:
    return COMPACT_CARD_COUNT if viewport is ViewportClass.COMPACT else REGULAR_CARD_COUNT


def rotate(angle: float, delta: float) -> float:
    """Add delta degrees to angle, wrapping into [0, 360)."""
    result = (angle + delta) % FULL_TURN
    # A tiny negative sum rounds up to exactly 360.0 under float modulo.
    if result >= FULL_TURN:
        return 0.0
    return result


def spawn_card(card_id: int, rng: random.Random) -> DecorativeCard:
    return DecorativeCard(
        id=card_id,
        x=rng.random() * LOWER_BOUND,
        y=rng.random() * LOWER_BOUND,
        rotation=rng.random() * FULL_TURN,
        suit=rng.choice(SUITS),
        rank=rng.choice(RANKS),
        speed=MIN_SPEED + rng.random() * SPEED_SPREAD,
        rotation_speed=(rng.random() - 0.5) * ROTATION_SPEED_SPREAD,
    )


def spawn_cards(viewport: ViewportClass, rng: random.Random) -> list[DecorativeCard]:
    """Create the full card set for a viewport class, ids 0..N-1."""
    return [spawn_card(card_id, rng) for card_id in range(card_count(viewport))]


def advance_card(card: DecorativeCard, rng: random.Random) -> DecorativeCard:
    """Move one card forward by a single tick."""
    y = card.y + card.speed
    if y > LOWER_BOUND:
        return card.model_copy(
            update={
                "y": RECYCLE_Y,
                "x": rng.random() * LOWER_BOUND,
                "rotation": rng.random() * FULL_TURN,
            },
        )
    return card.model_copy(update={"y": y, "rotation": rotate(card.rotation, card.rotation_speed)})


def advance_cards(cards: list[DecorativeCard], rng: random.Random) -> list[DecorativeCard]:
    return [advance_card(card, rng) for card in cards]
