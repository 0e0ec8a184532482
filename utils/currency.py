from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from models.errors import ValidationError

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Parse a user- or file-supplied amount into a cent-quantized Decimal.

    Accepts Decimal, int, float and strings using either '.' or ',' as the
    decimal separator. Raises ValidationError on anything unparsable.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, avoiding binary noise like 0.1000000000000000055
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(" ", "")
        if "," in text:
            text = text.replace(".", "").replace(",", ".")
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ValidationError(f"Invalid amount: {value!r}") from None
    else:
        raise ValidationError(f"Invalid amount: {value!r}")
    if not result.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        return result.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the context precision allows
        raise ValidationError(f"Amount out of range: {value!r}") from None


def format_currency(amount: Decimal, symbol: str = "R$") -> str:
    """Format an amount as Brazilian currency, e.g. 'R$ 1.234,56'."""
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{symbol} {text}"


def format_signed(amount: Decimal, symbol: str = "R$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), symbol)}"
