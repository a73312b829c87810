import math
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

NUMERIC_CHARS = set("0123456789.-+")


class ValueFormatter:
    """
    Renders numbers in the textual style of an existing literal.

    Style is taken from the template text: integer vs. decimal, number of
    decimals, trailing unit suffix, missing leading zero ('.5') and explicit
    plus sign ('+3'). Formatting is pure and formatting a literal's own value
    reproduces the literal.
    """

    @staticmethod
    def split_numeric_suffix(text: str) -> Tuple[str, str]:
        """
        Split a literal into its numeric part and trailing unit.

        '2.5rem' -> ('2.5', 'rem'), '-0.03em' -> ('-0.03', 'em'), '300' -> ('300', '')
        """
        for i in range(len(text) - 1, -1, -1):
            if text[i] in NUMERIC_CHARS:
                return text[:i + 1], text[i + 1:]
        # No numeric character at all - treat the whole text as the number
        return text, ''

    @staticmethod
    def decimal_places(value: float) -> int:
        """Significant decimals of value: 0.25 -> 2, 1.0 -> 0, 1e-05 -> 5."""
        try:
            exponent = Decimal(repr(float(value))).normalize().as_tuple().exponent
        except (InvalidOperation, ValueError):
            return 0
        if not isinstance(exponent, int):
            return 0
        return max(0, -exponent)

    @staticmethod
    def round_half_away(value: float) -> int:
        """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
        return int(math.copysign(math.floor(abs(value) + 0.5), value))

    @staticmethod
    def format_value(value: float, template: str, step: Optional[float] = None) -> str:
        """
        Format value to match template.

        Args:
            value: New numeric value
            template: Current literal text, e.g. '2.50rem' or '.5'
            step: Optional step hint; its precision is never truncated

        Returns:
            Text of the new literal including the preserved unit suffix

        Non-canonical templates are normalised on the first write, so they do
        not reproduce themselves ('5.' -> '5', '1.0e3' -> '1000.000').
        """
        numeric, suffix = ValueFormatter.split_numeric_suffix(template)

        if '.' not in numeric:
            formatted = str(ValueFormatter.round_half_away(value))
        else:
            template_decimals = len(numeric.split('.', 1)[1])
            step_decimals = ValueFormatter.decimal_places(step) if step is not None else 0
            decimals = max(template_decimals, step_decimals)
            formatted = f"{value:.{decimals}f}"

            # Keep the no-leading-zero style ('.5', '-.5')
            unsigned = numeric.lstrip('+-')
            if unsigned.startswith('.'):
                if formatted.startswith('0.'):
                    formatted = formatted[1:]
                elif formatted.startswith('-0.'):
                    formatted = '-' + formatted[2:]

        if numeric.startswith('+') and not formatted.startswith('-'):
            formatted = '+' + formatted

        return formatted + suffix

    @staticmethod
    def parse_value(text: str) -> Optional[float]:
        """Best-effort numeric value of a literal, ignoring its unit. None if unparsable."""
        numeric, _ = ValueFormatter.split_numeric_suffix(text)
        try:
            value = float(numeric)
        except ValueError:
            return None
        if math.isnan(value) or math.isinf(value):
            return None
        return value
