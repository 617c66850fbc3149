"""
Rarity normalization.

Series pages annotate rarities freely: footnotes on following lines,
short-print markers, and so on. Normalization reduces that text to one
canonical label so the rarity facet is not fragmented.
"""

SHORT_PRINT_MARKER = "Short Print"

# Labels seeded into every new catalog store
CANONICAL_RARITIES = (
    "Common",
    "Rare",
    "Super Rare",
    "Ultra Rare",
    "Secret Rare",
    "Quarter Century Rare",
)


def normalize_rarity(raw_text: str) -> str:
    """
    Map raw rarity text to its canonical label.

    - Any text mentioning "Short Print" is a printing variant of Common.
    - Otherwise only the first line counts; later lines are annotations.
    - Surrounding whitespace is dropped.

    Never fails: empty input yields an empty string.
    """
    if SHORT_PRINT_MARKER in raw_text:
        return "Common"
    if "\n" in raw_text:
        raw_text = raw_text.split("\n", 1)[0]
    return raw_text.strip()
