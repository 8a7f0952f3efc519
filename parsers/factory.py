"""Factory for selecting the line parser for a CSV row."""

from typing import Optional

from parsers.base import BaseLineParser
from parsers.detail_line import DetailLineParser
from parsers.main_line import MainLineParser
from utils.ids import IdFactory, generate_id


class LineParserFactory:
    """Map the leading tag of a row to its line parser."""

    def __init__(self, id_factory: IdFactory = generate_id):
        """Initialize factory with the id source shared by all parsers."""
        self.id_factory = id_factory
        self._parsers = self._build_parser_map()

    def _build_parser_map(self) -> dict[str, BaseLineParser]:
        """Build mapping of row tags to parser instances."""
        parsers = [MainLineParser(self.id_factory), DetailLineParser(self.id_factory)]
        return {parser.tag: parser for parser in parsers}

    def get_parser(self, tag: str) -> Optional[BaseLineParser]:
        """
        Get the parser for a row tag.

        Args:
            tag: Trimmed first field of the row

        Returns:
            Parser instance, or None for tags that are not invoice data
        """
        return self._parsers.get(tag)

    def get_supported_tags(self) -> list[str]:
        return list(self._parsers.keys())
