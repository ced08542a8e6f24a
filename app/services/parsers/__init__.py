from app.services.parsers.base import ParseContext, ParsedRow, ParseResult, RecordParser
from app.services.parsers.distributor import DistributorParser
from app.services.parsers.prs import PrsParser

__all__ = [
    "ParseContext",
    "ParsedRow",
    "ParseResult",
    "RecordParser",
    "DistributorParser",
    "PrsParser",
]
