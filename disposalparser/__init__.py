"""disposalparser - find DEA controlled-substance disposal sites near a ZIP code.

Quick usage::

    from disposalparser import get_disposal_sites

    for site in get_disposal_sites("73120", "20"):
        print(site.name, site.city_state_zip, site.distance)

Extraction only (no browser)::

    from disposalparser import HtmlDocument, extract

    sites = extract(HtmlDocument(saved_html))
"""

from disposalparser.document import DocumentView, HtmlDocument
from disposalparser.extractors.engine import ExtractionResult, extract, run_extraction
from disposalparser.items import SiteRecord
from disposalparser.parser import DisposalScraper
from disposalparser.query import ScrapeError, get_disposal_sites, parse

__version__ = "0.1.0"
__all__ = [
    "DisposalScraper",
    "DocumentView",
    "ExtractionResult",
    "HtmlDocument",
    "ScrapeError",
    "SiteRecord",
    "extract",
    "get_disposal_sites",
    "parse",
    "run_extraction",
]
