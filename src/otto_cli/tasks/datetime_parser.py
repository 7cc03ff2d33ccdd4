"""Reading and rendering task times."""

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from otto_cli.exceptions import FormatError
from otto_cli.settings_mixins import (
    DEFAULT_DATETIME_DISPLAY_FORMAT,
    DEFAULT_DATETIME_INPUT_FORMATS,
)

if TYPE_CHECKING:
    from otto_cli.config import OttoSettings


class DateTimeParser:
    """Parses user-supplied time text with a fixed list of strptime formats.

    Example:
        >>> parser = DateTimeParser()
        >>> parser.parse("2019-12-02 1800")
        datetime.datetime(2019, 12, 2, 18, 0)
        >>> parser.format(parser.parse("2019-12-02"))
        'Dec 02 2019, 00:00'
    """

    def __init__(
        self,
        input_formats: Sequence[str] | None = None,
        display_format: str = DEFAULT_DATETIME_DISPLAY_FORMAT,
    ) -> None:
        formats = DEFAULT_DATETIME_INPUT_FORMATS if input_formats is None else input_formats
        self.input_formats = [fmt for fmt in formats if fmt.strip()]
        self.display_format = display_format

    @classmethod
    def from_settings(cls, settings: "OttoSettings") -> "DateTimeParser":
        return cls(
            input_formats=settings.datetime_input_formats,
            display_format=settings.datetime_display_format,
        )

    def parse(self, text: str) -> datetime:
        """Parse time text, trying each input format in order.

        Raises:
            FormatError: If the text is empty or matches no format.
        """
        value = (text or "").strip()
        if not value:
            raise FormatError("Time must not be empty")

        for fmt in self.input_formats:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue

        raise FormatError(
            f"Cannot read '{value}' as a time. "
            f"Accepted formats: {', '.join(self.input_formats)}"
        )

    def format(self, value: datetime) -> str:
        return value.strftime(self.display_format)
