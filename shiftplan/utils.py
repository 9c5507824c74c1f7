"""Utility functions for formatting results."""


def format_currency(amount: float) -> str:
    """
    Format an amount with thousand separators and 2 decimal places.

    Args:
        amount: Amount to format

    Returns:
        Formatted string like "1,234.50"

    Examples:
        >>> format_currency(1234.5)
        '1,234.50'
        >>> format_currency(-86.5)
        '-86.50'
    """
    return f"{amount:,.2f}"


def format_computation_time(milliseconds: float) -> str:
    """
    Format a duration for display.

    Args:
        milliseconds: Duration in milliseconds

    Returns:
        "850ms" under a second, "2.4s" under a minute, "1m 5s" otherwise

    Examples:
        >>> format_computation_time(850)
        '850ms'
        >>> format_computation_time(2400)
        '2.4s'
        >>> format_computation_time(65000)
        '1m 5s'
    """
    if milliseconds < 1000:
        return f"{round(milliseconds)}ms"
    if milliseconds < 60000:
        return f"{milliseconds / 1000:.1f}s"
    minutes = int(milliseconds // 60000)
    seconds = int((milliseconds % 60000) // 1000)
    return f"{minutes}m {seconds}s"
