"""Number and time formatting shared by notifications and reports."""


def fmt_integer(value: float) -> str:
    """Whole number with thousands separators (1234.7 -> '1,235')."""
    return f"{value:,.0f}"


def fmt_decimal(value: float) -> str:
    """Two decimals with thousands separators (1234.5 -> '1,234.50')."""
    return f"{value:,.2f}"


def format_elapsed(seconds: float) -> str:
    """Elapsed seconds as hh:mm:ss."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
