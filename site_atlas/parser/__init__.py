"""Page inspection: DOM extraction from rendered pages."""
from site_atlas.parser.html_parser import extract_page
from site_atlas.parser.inspector import PageInspector

__all__ = ["extract_page", "PageInspector"]
