from .page import Page, is_usable
from . import structured_data, microdata, plugins, headings, ai_fallback

# Markup-based strategies in priority order. The AI fallback is async and
# runs separately, after all of these miss.
STRATEGIES = [
    ("structured_data", structured_data.extract),
    ("microdata", microdata.extract),
    ("plugins", plugins.extract),
    ("headings", headings.extract),
]

__all__ = ["Page", "is_usable", "STRATEGIES", "ai_fallback"]
