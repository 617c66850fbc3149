"""
Card frame colours.

Static lookup from a card's (main, sub) type to the colours used when
rendering its row. "*" in a table key matches any value.
"""

from dataclasses import dataclass

from cardbinder.models.card import CardType

ANY = "*"


@dataclass(frozen=True)
class DisplayStyle:
    """Foreground and background colours as CSS hex strings."""

    foreground: str
    background: str


DEFAULT_STYLE = DisplayStyle(foreground="#000000", background="#FFFFFF")

NORMAL_MONSTER = DisplayStyle(foreground="#000000", background="#FDE68A")
EFFECT_MONSTER = DisplayStyle(foreground="#000000", background="#FF8B53")

STYLE_TABLE: dict[tuple[str, str], DisplayStyle] = {
    ("Trap Card", ANY): DisplayStyle(foreground="#FFFFFF", background="#BC5A84"),
    ("Spell Card", ANY): DisplayStyle(foreground="#FFFFFF", background="#1D9E74"),
    ("Fusion Monster", ANY): DisplayStyle(foreground="#FFFFFF", background="#A086B7"),
    ("Ritual Monster", ANY): DisplayStyle(foreground="#000000", background="#9DB5CC"),
    ("Monster", "Effect"): EFFECT_MONSTER,
    ("Monster", "Flip"): EFFECT_MONSTER,
    ("Monster", "Toon"): EFFECT_MONSTER,
    ("Monster", "Flip Effect"): EFFECT_MONSTER,
    ("Monster", "Toon Effect"): EFFECT_MONSTER,
    ("Monster", ANY): NORMAL_MONSTER,
    (ANY, "Effect"): EFFECT_MONSTER,
    (ANY, "Flip"): EFFECT_MONSTER,
}


def display_style(card_type: CardType) -> DisplayStyle:
    """
    Colours for a card type.

    Lookup order: exact (main, sub), then (main, any), then (any, sub).
    Types matching none of these get black on white.
    """
    for key in (
        (card_type.main, card_type.sub),
        (card_type.main, ANY),
        (ANY, card_type.sub),
    ):
        style = STYLE_TABLE.get(key)
        if style is not None:
            return style
    return DEFAULT_STYLE
