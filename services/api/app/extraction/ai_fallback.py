"""
Strategy 5: ask the text model to read the page.

Expensive; the orchestrator only gets here after every markup-based
strategy has come up empty.
"""

import re
import json
import logging
from typing import Any, Optional

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

from ..core.ai_client import ai_client
from ..parsing import format_duration
from ..schemas import RecipeDraft
from ..settings import settings
from .page import Page, clean_text, clean_lines

logger = logging.getLogger("recipe_import.ai")

NOISE_TAGS = ["script", "style", "nav", "header", "footer", "iframe", "noscript", "svg"]

# Below this there is nothing worth sending
MIN_TEXT_LENGTH = 200

SYSTEM_PROMPT = """Return VALID JSON only. No markdown. No extra keys.

You extract a single recipe from the text of a web page.
Output exactly one JSON object with these keys:
{
  "title": "string",
  "description": "string",
  "ingredients": ["one ingredient line per entry, with its quantity"],
  "instructions": ["one step per entry, in order"],
  "servings": "string",
  "prep_time": "string",
  "cook_time": "string",
  "image_url": "string"
}

Rules:
1. Copy ingredient lines and steps from the page; do not invent any.
2. Use "" or [] for anything the page does not state.
3. If the page holds no recipe, return {"title": "", "ingredients": [], "instructions": []}.
"""


def page_text(soup: BeautifulSoup, budget: int) -> str:
    """
    Visible page text with boilerplate skipped, truncated to `budget` chars.
    Reads the page's existing soup and leaves it untouched.
    """
    pieces = [
        s for s in soup.find_all(string=True)
        if not isinstance(s, PreformattedString) and s.find_parent(NOISE_TAGS) is None
    ]
    text = re.sub(r'\s+', ' ', " ".join(pieces)).strip()
    return text[:budget]


def parse_json_object(reply: str) -> Optional[dict]:
    """First JSON object in a model reply; tolerates code fences and prose around it."""
    if not reply:
        return None
    text = re.sub(r'```(?:json)?', '', reply)
    decoder = json.JSONDecoder()
    for m in re.finditer(r'\{', text):
        try:
            data, _ = decoder.raw_decode(text, m.start())
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


def _string(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return clean_text(value)


def _lines(value: Any) -> list[str]:
    if isinstance(value, str):
        return clean_lines(value.splitlines())
    if isinstance(value, list):
        return clean_lines([v for v in value if isinstance(v, (str, int, float))])
    return []


def draft_from_reply(data: dict) -> RecipeDraft:
    prep = _string(data.get("prep_time"))
    cook = _string(data.get("cook_time"))
    return RecipeDraft(
        title=_string(data.get("title")) or None,
        description=_string(data.get("description")) or None,
        image_url=_string(data.get("image_url")) or None,
        servings=_string(data.get("servings")) or None,
        prep_time=format_duration(prep) or None,
        cook_time=format_duration(cook) or None,
        ingredients=_lines(data.get("ingredients")),
        instructions=_lines(data.get("instructions")),
    )


async def extract(page: Page) -> Optional[RecipeDraft]:
    if not ai_client.is_available():
        logger.info("AI fallback disabled, skipping")
        return None

    text = page_text(page.soup, settings.ai_text_budget)
    if len(text) < MIN_TEXT_LENGTH:
        logger.info(f"Too little text on {page.url} for AI fallback ({len(text)} chars)")
        return None

    prompt = f"Page URL: {page.url}\n\nPage text:\n{text}"
    reply = await ai_client.generate_text(prompt, system_instruction=SYSTEM_PROMPT, json_output=True)
    data = parse_json_object(reply) if reply else None
    if data is None:
        logger.warning(f"AI fallback returned no usable JSON for {page.url}")
        return None

    return draft_from_reply(data)
