"""Display formatting for currency amounts and percentages."""

from pydantic import BaseModel, Field


class CurrencyFormatter(BaseModel):
    """Formats currency and percentage values for display."""

    currency_symbol: str = Field(default="$", description="Currency symbol")
    decimal_places: int = Field(
        default=2, ge=0, le=10, description="Number of decimal places"
    )

    def format_currency(self, amount: float) -> str:
        """
        Format a currency amount for display.

        Args:
            amount: The amount to format

        Returns:
            Formatted string such as ``$1,234.56`` or ``-$1,234.56``
        """
        rounded = round(abs(amount), self.decimal_places)
        if self.decimal_places > 0:
            formatted = f"{rounded:,.{self.decimal_places}f}"
        else:
            formatted = f"{int(rounded):,}"

        sign = "-" if amount < 0 and rounded != 0 else ""
        return f"{sign}{self.currency_symbol}{formatted}"

    def format_percentage(self, value: float) -> str:
        """
        Format a signed percentage for display.

        Args:
            value: The value, already in percent (5.0 = 5%)

        Returns:
            Formatted string such as ``+5.00%`` or ``-5.00%``
        """
        sign = "+" if value >= 0 else ""
        return f"{sign}{value:.{self.decimal_places}f}%"


_default_formatter = CurrencyFormatter()


def format_currency(amount: float) -> str:
    """Format an amount as US dollars with two decimals."""
    return _default_formatter.format_currency(amount)


def format_percentage(value: float) -> str:
    """Format a percentage with an explicit sign and two decimals."""
    return _default_formatter.format_percentage(value)
