"""Currency and category display helpers"""

import re
from typing import Dict, Optional

from finance_tracker.domain.exceptions import UnknownCategoryError

CURRENCY_METADATA: Dict[str, Dict] = {
    "KRW": {"name": "South Korean won", "symbol": "₩", "decimal_places": 0},
    "USD": {"name": "US dollar", "symbol": "$", "decimal_places": 2},
    "JPY": {"name": "Japanese yen", "symbol": "¥", "decimal_places": 0},
    "EUR": {"name": "Euro", "symbol": "€", "decimal_places": 2},
    "GBP": {"name": "British pound", "symbol": "£", "decimal_places": 2},
    "CNY": {"name": "Chinese yuan", "symbol": "¥", "decimal_places": 2},
}

# Fixed fallback rates, quoted as units of the second currency per unit of the first
DEFAULT_EXCHANGE_RATES: Dict[str, float] = {
    "USD-KRW": 1300.0,
    "EUR-KRW": 1400.0,
    "JPY-KRW": 9.5,
    "CNY-KRW": 180.0,
    "GBP-KRW": 1600.0,
}

INCOME_CATEGORIES: Dict[str, str] = {
    "salary": "Salary",
    "freelance": "Freelance",
    "business": "Business",
    "investment": "Investment",
    "rental": "Rental income",
    "bonus": "Bonus",
    "gift": "Gift",
    "refund": "Refund",
    "other_income": "Other income",
}

EXPENSE_CATEGORIES: Dict[str, str] = {
    "food": "Food",
    "groceries": "Groceries",
    "restaurant": "Restaurants",
    "coffee": "Coffee",
    "transport": "Transport",
    "public_transport": "Public transport",
    "taxi": "Taxi",
    "fuel": "Fuel",
    "parking": "Parking",
    "housing": "Housing",
    "rent": "Rent",
    "utilities": "Utilities",
    "internet": "Internet",
    "phone": "Phone",
    "shopping": "Shopping",
    "clothing": "Clothing",
    "electronics": "Electronics",
    "books": "Books",
    "healthcare": "Healthcare",
    "medical": "Medical",
    "pharmacy": "Pharmacy",
    "fitness": "Fitness",
    "entertainment": "Entertainment",
    "movies": "Movies",
    "games": "Games",
    "subscription": "Subscriptions",
    "education": "Education",
    "courses": "Courses",
    "insurance": "Insurance",
    "bank_fees": "Bank fees",
    "loan_payment": "Loan payment",
    "pets": "Pets",
    "charity": "Charity",
    "gifts": "Gifts",
    "other_expense": "Other expense",
}


def is_valid_currency(currency: str) -> bool:
    return currency in CURRENCY_METADATA


def get_currency_symbol(currency: str) -> str:
    metadata = CURRENCY_METADATA.get(currency)
    return metadata["symbol"] if metadata else currency


def format_currency(amount: float, currency: str = "KRW") -> str:
    """
    Format an amount with the currency's symbol and decimal places.

    Unknown currencies fall back to "<amount> <code>".

    Example:
        format_currency(1500000) -> "₩1,500,000"
        format_currency(-12.5, "USD") -> "-$12.50"
    """
    metadata = CURRENCY_METADATA.get(currency)
    if metadata is None:
        return f"{amount} {currency}"

    places = metadata["decimal_places"]
    sign = "-" if amount < 0 else ""
    return f"{sign}{metadata['symbol']}{abs(amount):,.{places}f}"


def parse_currency(value: str, currency: str = "KRW") -> float:
    """Extract the numeric amount from a formatted string, 0.0 when nothing parses"""
    symbol = get_currency_symbol(currency)
    cleaned = value.replace(symbol, "").replace(",", "").strip()
    cleaned = re.sub(r"[^0-9.\-]", "", cleaned)
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def convert_currency(
    amount: float,
    from_currency: str,
    to_currency: str,
    exchange_rate: Optional[float] = None,
) -> float:
    """
    Convert between currencies using an explicit rate or the fixed defaults.

    Pairs without a direct or inverse default rate are routed through KRW.
    When no route exists the amount is returned unchanged.
    """
    if from_currency == to_currency:
        return amount

    if exchange_rate:
        return amount * exchange_rate

    rate = DEFAULT_EXCHANGE_RATES.get(f"{from_currency}-{to_currency}")
    if rate:
        return amount * rate

    reverse_rate = DEFAULT_EXCHANGE_RATES.get(f"{to_currency}-{from_currency}")
    if reverse_rate:
        return amount / reverse_rate

    from_rate = DEFAULT_EXCHANGE_RATES.get(f"{from_currency}-KRW")
    to_rate = DEFAULT_EXCHANGE_RATES.get(f"{to_currency}-KRW")
    if from_rate and to_rate:
        return amount * from_rate / to_rate

    return amount


def is_valid_category(category: str) -> bool:
    return category in INCOME_CATEGORIES or category in EXPENSE_CATEGORIES


def get_category_name(category: str) -> str:
    """Display name of a category key, or the key itself when unknown"""
    return INCOME_CATEGORIES.get(category) or EXPENSE_CATEGORIES.get(category) or category


def get_category_type(category: str) -> str:
    if category in INCOME_CATEGORIES:
        return "income"
    if category in EXPENSE_CATEGORIES:
        return "expense"
    raise UnknownCategoryError(f"Unknown category: {category}")
