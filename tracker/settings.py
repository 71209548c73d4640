from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict

from tracker.storage import CURRENCY_KEY, THEME_KEY, KeyValueStore


@dataclass(frozen=True)
class CurrencyFormat:
    code: str
    locale: str
    group_sep: str
    decimal_sep: str
    symbol_after: bool = False
    indian_grouping: bool = False


CURRENCIES: Dict[str, CurrencyFormat] = {
    "$": CurrencyFormat(code="USD", locale="en-US", group_sep=",", decimal_sep="."),
    "€": CurrencyFormat(code="EUR", locale="de-DE", group_sep=".", decimal_sep=",", symbol_after=True),
    "£": CurrencyFormat(code="GBP", locale="en-GB", group_sep=",", decimal_sep="."),
    "₹": CurrencyFormat(code="INR", locale="en-IN", group_sep=",", decimal_sep=".", indian_grouping=True),
}
DEFAULT_CURRENCY = "$"


def _group(digits: str, sep: str, indian: bool) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    size = 2 if indian else 3
    groups = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return sep.join(groups + [tail])


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY, decimals: int = 2) -> str:
    """Format `amount` the way the currency's display locale writes money.

    Euro amounts put the symbol after a non-breaking space, rupees use
    lakh grouping. Rounding is half-up on the shortest decimal form.
    """
    fmt = CURRENCIES.get(symbol)
    if fmt is None:
        symbol, fmt = DEFAULT_CURRENCY, CURRENCIES[DEFAULT_CURRENCY]

    quantum = Decimal(1).scaleb(-decimals)
    value = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, frac = f"{abs(value):f}".partition(".")

    number = _group(whole, fmt.group_sep, fmt.indian_grouping)
    if decimals > 0:
        number = f"{number}{fmt.decimal_sep}{frac}"

    if fmt.symbol_after:
        return f"{sign}{number}\u00a0{symbol}"
    return f"{sign}{symbol}{number}"


@dataclass
class Preferences:
    """Theme and currency choice, persisted independently of the ledgers."""

    dark_mode: bool = False
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def load(cls, store: KeyValueStore) -> "Preferences":
        currency = store.get_item(CURRENCY_KEY) or DEFAULT_CURRENCY
        if currency not in CURRENCIES:
            currency = DEFAULT_CURRENCY
        return cls(dark_mode=store.get_item(THEME_KEY) == "dark", currency=currency)

    def save(self, store: KeyValueStore) -> None:
        store.set_item(THEME_KEY, self.theme)
        store.set_item(CURRENCY_KEY, self.currency)

    @property
    def theme(self) -> str:
        return "dark" if self.dark_mode else "light"

    @property
    def currency_code(self) -> str:
        return CURRENCIES[self.currency].code

    def format(self, amount: float, decimals: int = 2) -> str:
        return format_currency(amount, self.currency, decimals)
