import re

# Trailing run of digits, e.g. "001" in "LOB-EN001"
TRAILING_DIGITS = re.compile(r"(\d+)$")


def split_card_number(number: str) -> tuple[str, int]:
    """
    Split a printed card number into series prefix and collection number.

    "LOB-EN001" -> ("LOB", 1)
    "SDY-006"   -> ("SDY", 6)
    "PROMO"     -> ("PROMO", 0)

    The prefix is the text before the first hyphen of the non-numeric head.
    Numbers without trailing digits get collection number 0.
    """
    number = number.strip()
    match = TRAILING_DIGITS.search(number)
    if match:
        head = number[: match.start()]
        collection_number = int(match.group(1))
    else:
        head = number
        collection_number = 0

    prefix = head.split("-", 1)[0]
    return prefix, collection_number


def canonical_card_number(number: str) -> str:
    """
    Catalog key for a printed card number: "{prefix}-{nnn}".

    Region codes are dropped so the English and other printings of a card
    share one catalog entry: "LOB-EN001" and "LOB-E001" -> "LOB-001".
    """
    prefix, collection_number = split_card_number(number)
    return f"{prefix}-{collection_number:03d}"
