import math
import re
from typing import Iterable, Optional, Set, Union
from bookbridge.catalog.constants import CURRENCY_MARKER, FUZZY_MAX_DISTANCE

Price = Union[int, float, str, None]

_AMOUNT_RE = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")

ZERO_PRICE = f"{CURRENCY_MARKER}0.00"


def _parse_amount(text: str) -> Optional[float]:
    # thousands separators would split "1,200.50" into two numbers
    match = _AMOUNT_RE.search(text.replace(",", ""))
    if not match:
        return None
    return float(match.group())


def normalize_price(price: Price) -> str:
    """Canonical display form of a price: marker + two decimals, e.g. "₹450.00".

    Strings already carrying the marker are returned as-is, which keeps the
    function idempotent. Anything that does not parse to a finite number
    becomes "₹0.00".
    """
    if isinstance(price, str):
        if price.strip().startswith(CURRENCY_MARKER):
            return price
        value = _parse_amount(price)
    elif isinstance(price, bool) or price is None:
        value = None
    else:
        try:
            value = float(price)
        except (TypeError, ValueError, OverflowError):
            value = None

    if value is None or not math.isfinite(value):
        return ZERO_PRICE
    return f"{CURRENCY_MARKER}{value:.2f}"


def price_value(price: Price) -> float:
    """Numeric amount behind any price representation (0.0 when unreadable)."""
    canonical = normalize_price(price)
    value = _parse_amount(canonical.strip()[len(CURRENCY_MARKER):])
    if value is None or not math.isfinite(value):
        return 0.0
    return value


def levenshtein(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur[j] = min(prev[j] + 1,        # deletion
                         cur[j - 1] + 1,     # insertion
                         prev[j - 1] + cost) # substitution
        prev = cur
    return prev[-1]


def fuzzy_match(text: Optional[str], query: str, max_distance: int = FUZZY_MAX_DISTANCE) -> bool:
    """Case-insensitive substring match, falling back to edit distance per word
    (and against the whole text) within max_distance."""
    if not text:
        return False
    t = text.lower()
    q = query.strip().lower()
    if not q or q in t:
        return True

    for candidate in t.split() + [t]:
        if abs(len(candidate) - len(q)) > max_distance:
            continue
        if levenshtein(candidate, q) <= max_distance:
            return True
    return False


def words_of(*parts: Optional[str]) -> Set[str]:
    return {w for p in parts if p for w in p.lower().split()}


def shares_word(left: Iterable[str], right: Iterable[str]) -> bool:
    """True when any word of one side contains, or is contained in, a word of the other."""
    right = list(right)
    return any(a in b or b in a for a in left for b in right)
