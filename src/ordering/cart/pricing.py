"""Cart pricing — promo codes, tax and totals shared by carts and orders."""

from shared.promotions import PROMO_CODES

TAX_RATE = 0.18
FREE_SHIPPING = 0.0


def round2(value):
    return round(float(value or 0.0), 2)


def normalize_code(code):
    return (code or "").strip().upper()


def promo_percent(code):
    """Discount percentage for a promo code, or None if the code is not valid."""
    return PROMO_CODES.get(normalize_code(code))


def price_lines(lines, coupon_code=None, currency="USD"):
    """Totals for a list of ``{price, quantity}`` lines.

    The promo discount comes off the item total first, tax is charged on
    what remains, and shipping is free.
    """
    items_total = round2(sum(float(line["price"]) * int(line["quantity"]) for line in lines))
    percent = promo_percent(coupon_code) or 0
    discount = round2(items_total * percent / 100)
    subtotal = round2(items_total - discount)
    tax = round2(subtotal * TAX_RATE)
    shipping = FREE_SHIPPING
    return {
        "items_total": items_total,
        "discount": discount,
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "total_price": round2(subtotal + tax + shipping),
        "currency": currency,
    }
