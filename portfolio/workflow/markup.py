from __future__ import annotations

import warnings
from typing import Any

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

# plain answers such as a bare URL are legitimate input here
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)


def strip_markup(value: Any) -> str:
    """Visible text of a rich-text value, trimmed. None becomes ""."""
    if value is None:
        return ""
    # parsed even without tags so entities like &nbsp; resolve to whitespace
    return BeautifulSoup(str(value), "html.parser").get_text().strip()


def is_blank(value: Any) -> bool:
    return strip_markup(value) == ""
