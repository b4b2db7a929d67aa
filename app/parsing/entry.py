import math
import re

from loguru import logger

from app.errors import ParseFailure
from app.models.schemas import ParsedEntry

ALLOWED_CURRENCIES = ("TRY", "GEL", "USD", "RUB")
DEFAULT_CURRENCY = "RUB"
DEFAULT_TITLE = "(без названия)"

_AMOUNT_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_SHORT_DATE = re.compile(r"\d{6}")


def parse_amount(token: str) -> float:
    """Read the leading number of a token, "3000,50" and "500р" included."""
    match = _AMOUNT_PREFIX.match(token.replace(",", ".", 1))
    if match is None:
        raise ParseFailure()
    amount = float(match.group())
    if not math.isfinite(amount):
        raise ParseFailure()
    return amount


def parse_entry(raw: str) -> ParsedEntry:
    """Parse a line like "3000.45 Такси до отеля USD 150425".

    The first token is the amount. Trailing tokens are checked right to left,
    once each: a six-digit short date first, then a currency code. Whatever
    remains is the title.
    """
    tokens = raw.split()
    if not tokens:
        raise ParseFailure()

    amount = parse_amount(tokens[0])
    rest = tokens[1:]

    raw_date = None
    if rest and _SHORT_DATE.fullmatch(rest[-1]):
        raw_date = rest.pop()

    currency = DEFAULT_CURRENCY
    if rest and rest[-1].upper() in ALLOWED_CURRENCIES:
        currency = rest.pop().upper()

    title = " ".join(rest) or DEFAULT_TITLE
    logger.debug(
        "Parsed entry: amount={} title={!r} currency={} date={}",
        amount, title, currency, raw_date,
    )
    return ParsedEntry(amount=amount, title=title, currency=currency, raw_date=raw_date)
