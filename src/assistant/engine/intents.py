"""Keyword-based intent classification and query parsing for the assistant."""

import re
from enum import Enum


class Intent(Enum):
    GREETING = "greeting"
    SHIPPING = "shipping"
    RETURNS = "returns"
    DEALS = "deals"
    ORDER_STATUS = "order_status"
    PRODUCT_SEARCH = "product_search"
    THANKS = "thanks"
    FALLBACK = "fallback"


# Checked in order; the first intent with a matching keyword wins
_INTENT_KEYWORDS = [
    (Intent.RETURNS, ("return", "returns", "refund", "refunds", "exchange", "replace")),
    (Intent.ORDER_STATUS, ("where is my order", "order status", "track", "tracking", "my order")),
    (Intent.SHIPPING, ("shipping", "delivery", "deliver", "ship", "dispatch")),
    (
        Intent.DEALS,
        ("coupon", "coupons", "deal", "deals", "discount", "discounts", "offer", "offers", "promo", "sale", "code"),
    ),
    (Intent.THANKS, ("thank", "thanks", "thx", "great help")),
    (
        Intent.PRODUCT_SEARCH,
        ("show", "find", "looking for", "recommend", "suggest", "buy", "need", "want", "best", "cheap", "under"),
    ),
    (Intent.GREETING, ("hello", "hi", "hey", "good morning", "good evening")),
]

# Keyword -> catalogue category. "women" is listed before "men" so it wins.
CATEGORY_SYNONYMS = [
    ("women's clothing", ("women", "woman", "ladies", "dress", "skirt", "blouse")),
    ("men's clothing", ("men", "man", "mens", "shirt", "jacket", "t-shirt", "tshirt")),
    (
        "jewelery",
        ("jewel", "jewelery", "jewelry", "jewellery", "ring", "necklace", "bracelet", "earring", "gold", "silver"),
    ),
    (
        "electronics",
        ("electronic", "laptop", "phone", "monitor", "ssd", "hard drive", "tv", "headphone", "gadget", "usb"),
    ),
]

_PRICE_CEILING = re.compile(
    r"(?:under|below|less than|within|max(?:imum)?|upto|up to|cheaper than)\s*(?:rs\.?|inr|\$|₹)?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


def _words(text):
    """Words in ``text``, plus their singular and non-possessive forms."""
    words = set()
    for word in re.findall(r"[a-z0-9'\-]+", text.lower()):
        words.add(word)
        if word.endswith("'s"):
            word = word[:-2]
            words.add(word)
        if word.endswith("s") and len(word) > 3:
            words.add(word[:-1])
    return words


def _matches(text, words, keyword):
    if " " in keyword:
        return keyword in text
    return keyword in words


def classify(message):
    text = (message or "").strip().lower()
    if not text:
        return Intent.FALLBACK

    words = _words(text)
    for intent, keywords in _INTENT_KEYWORDS:
        if any(_matches(text, words, k) for k in keywords):
            return intent

    if extract_category(text) or extract_price_ceiling(text) is not None:
        return Intent.PRODUCT_SEARCH
    return Intent.FALLBACK


def extract_category(message):
    text = (message or "").lower()
    words = _words(text)
    for category, keywords in CATEGORY_SYNONYMS:
        if any(_matches(text, words, k) for k in keywords):
            return category
    return None


def extract_price_ceiling(message):
    """The number in phrases like "under 500", or None."""
    match = _PRICE_CEILING.search(message or "")
    if not match:
        return None
    return float(match.group(1))


def search_terms(message):
    """Words worth matching against product titles, minus the filler."""
    stop = {
        "show", "me", "find", "looking", "for", "recommend", "suggest", "buy", "need", "want", "best",
        "cheap", "under", "below", "less", "than", "some", "a", "an", "the", "i", "please", "with", "and",
        "to", "of", "in", "on", "my", "is", "are", "any", "good", "within", "max", "up",
    }
    return {w for w in _words(message or "") if w not in stop and not w.isdigit() and len(w) > 2}
