"""Rule-based responder — turns a shopper's message into a structured reply.

The reply always has the same shape so the widget can render it without
branching: a greeting, a one-line summary, bullet points, a recommendation,
alternative queries to try, and a follow-up question. Product searches also
attach up to ``MAX_PRODUCTS`` catalogue cards ranked by rating.
"""

import structlog

from assistant.engine.intents import (
    CATEGORY_SYNONYMS,
    Intent,
    classify,
    extract_category,
    extract_price_ceiling,
    search_terms,
)
from shared.promotions import PROMO_CODES

logger = structlog.get_logger(__name__)

MAX_PRODUCTS = 3
HISTORY_WINDOW = 6

GREETING_TEXT = "Hi! I'm your shopping assistant. Looking for something specific?"
APOLOGY_TEXT = "I'm having trouble connecting to the server. Please try again!"


def trim_history(history, window=HISTORY_WINDOW):
    """The most recent ``window`` messages, oldest first."""
    if not history or window <= 0:
        return []
    return list(history)[-window:]


def _structured(greeting="", summary="", points=None, recommendation="", alternatives=None, follow_up=""):
    return {
        "greeting": greeting,
        "summary": summary,
        "points": list(points or []),
        "recommendation": recommendation,
        "alternatives": list(alternatives or []),
        "follow_up": follow_up,
    }


def _message_text(entry):
    if isinstance(entry, dict):
        return entry.get("text") or ""
    return getattr(entry, "text", "") or ""


def _message_type(entry):
    if isinstance(entry, dict):
        return entry.get("type")
    return getattr(entry, "type", None)


def _category_from_history(history):
    for entry in reversed(history):
        if _message_type(entry) != "user":
            continue
        category = extract_category(_message_text(entry))
        if category:
            return category
    return None


def product_card(product):
    return {
        "id": product.id,
        "title": product.title,
        "price": product.price,
        "image": product.image,
        "category": product.category,
        "rating": {"rate": product.rating.rate, "count": product.rating.count},
    }


def rank_products(products, category=None, ceiling=None, terms=None, limit=MAX_PRODUCTS):
    candidates = [p for p in products if not category or p.category.lower() == category.lower()]
    if ceiling is not None:
        candidates = [p for p in candidates if p.price <= ceiling]

    if terms:
        matching = [p for p in candidates if terms & set(f"{p.title} {p.description}".lower().split())]
        if matching:
            candidates = matching

    candidates.sort(key=lambda p: (p.rating.rate, p.rating.count), reverse=True)
    return candidates[:limit]


def _money(value):
    return f"${value:,.2f}"


def _search_reply(message, history, source):
    category = extract_category(message) or _category_from_history(history)
    ceiling = extract_price_ceiling(message)
    terms = search_terms(message)

    products = source.list_products(category=category)
    picks = rank_products(products, category=category, ceiling=ceiling, terms=terms)

    what = category or "products"
    budget = f" under {_money(ceiling)}" if ceiling is not None else ""
    other_categories = [c for c, _ in CATEGORY_SYNONYMS if c != category][:2]

    if not picks:
        return (
            _structured(
                greeting="Sorry!",
                summary=f"I couldn't find any {what}{budget} right now.",
                points=["Try a higher budget", "Try a broader search term"],
                recommendation="",
                alternatives=[f"Best {c}" for c in other_categories],
                follow_up="Want me to look in another category?",
            ),
            [],
        )

    best = picks[0]
    alternatives = [f"{what} under {_money(best.price)}" if ceiling is None else f"Best {what}"]
    alternatives += [f"Best {c}" for c in other_categories]
    return (
        _structured(
            greeting="Sure!",
            summary=f"Here are the top rated {what}{budget}.",
            points=[
                f"{p.title}: {_money(p.price)} ({p.rating.rate} stars from {p.rating.count} reviews)" for p in picks
            ],
            recommendation=f"My pick is {best.title} at {_money(best.price)}.",
            alternatives=alternatives,
            follow_up="Shall I add one of these to your cart?",
        ),
        [product_card(p) for p in picks],
    )


def _canned_reply(intent):
    if intent == Intent.GREETING:
        return _structured(
            greeting="Hi there!",
            summary="I can help you find products and answer questions about your orders.",
            points=[
                "Search by category, for example 'electronics under 500'",
                "Ask about shipping, returns or current deals",
            ],
            alternatives=["Best electronics", "Jewelery under 100", "Current deals"],
            follow_up="What are you shopping for today?",
        )
    if intent == Intent.SHIPPING:
        return _structured(
            greeting="Happy to help.",
            summary="Shipping is free on every order.",
            points=[
                "Orders are confirmed and packed within 1-2 business days",
                "Delivery usually takes 3-7 business days",
                "Every stage is shown on the order timeline under My Orders",
            ],
            alternatives=["Where is my order?", "Return policy"],
            follow_up="Anything else about delivery?",
        )
    if intent == Intent.RETURNS:
        return _structured(
            greeting="No problem.",
            summary="You can return most items within 7 days of delivery.",
            points=[
                "Items must be unused and in their original packaging",
                "Refunds go back to the original payment method",
                "Orders can be cancelled for free until they start processing",
            ],
            alternatives=["Shipping times", "Current deals"],
            follow_up="Would you like help with a specific order?",
        )
    if intent == Intent.DEALS:
        codes = sorted(PROMO_CODES.items(), key=lambda kv: kv[1], reverse=True)
        best_code, best_percent = codes[0]
        return _structured(
            greeting="Good news!",
            summary="These promo codes work at checkout.",
            points=[f"{code}: {percent}% off your order" for code, percent in codes],
            recommendation=f"Use {best_code} for the biggest saving ({best_percent}% off).",
            alternatives=["Best electronics", "Women's clothing under 50"],
            follow_up="Want me to find something to use it on?",
        )
    if intent == Intent.ORDER_STATUS:
        return _structured(
            greeting="Let's check.",
            summary="You can follow your order stage by stage from My Orders.",
            points=[
                "Placed, Confirmed, Processing, Packed, Shipped, Out for Delivery, Delivered",
                "Each step shows the date it was reached",
                "Orders can be cancelled while they are Placed or Confirmed",
            ],
            alternatives=["Shipping times", "Return policy"],
            follow_up="Is there anything else I can help with?",
        )
    if intent == Intent.THANKS:
        return _structured(
            greeting="You're welcome!",
            summary="Glad I could help.",
            follow_up="Anything else you're looking for?",
        )
    return _structured(
        greeting="Hmm.",
        summary="I'm not sure I understood that.",
        points=["I can search products by category and budget", "I can answer shipping, returns and deals questions"],
        alternatives=["Best electronics", "Current deals", "Shipping times"],
        follow_up="Could you rephrase that?",
    )


def respond(message, history=None, source=None, window=HISTORY_WINDOW):
    """Build ``{"structured": ..., "products": [...]}`` for one shopper message.

    Only the most recent ``window`` messages of ``history`` are considered.
    ``source`` is needed for product searches.
    """
    history = trim_history(history, window)
    intent = classify(message)

    logger.debug("assistant.intent", intent=intent.value)

    if intent == Intent.PRODUCT_SEARCH and source is not None:
        structured, products = _search_reply(message, history, source)
        return {"structured": structured, "products": products}

    return {"structured": _canned_reply(intent), "products": []}
