"""Display formatting helpers."""


def format_amount(value: float) -> str:
    """
    Format an amount with at most two decimals and no trailing zeros.

    137.0 -> "137", 80.5 -> "80.5", 1234567.891 -> "1234567.89"
    """
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
