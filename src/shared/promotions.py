"""Storewide promo codes, shared by cart pricing and the shopping assistant."""

PROMO_CODES = {
    "SAVE10": 10,
    "SAVE5": 5,
}
