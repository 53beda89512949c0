"""Title cleanup: strip the matched fragments out of the utterance."""

import re
from collections.abc import Iterable

from voicetask.services.keywords import PRIORITY_KEYWORDS

LEADING_CONNECTOR_RE = re.compile(r"^\s*(at|for|about)\s+", re.IGNORECASE)
TRAILING_CONNECTOR_RE = re.compile(r"\s+(at|for|about)\s*$", re.IGNORECASE)
TRAILING_AT_RE = re.compile(r"\s+at\s*$", re.IGNORECASE)


class TitleNormalizer:
    """Removes date, duration, location and priority words from the text.

    Removal order is fixed: date phrase, duration phrase, location name (only
    when it ends the text, with a dangling "at"), then every priority keyword
    as a whole word. Falls back to the raw text if nothing is left.
    """

    def __init__(self, priority_keywords: Iterable[str] | None = None):
        if priority_keywords is None:
            priority_keywords = [k for _, keywords in PRIORITY_KEYWORDS for k in keywords]
        self._keyword_patterns = [
            re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE) for keyword in priority_keywords
        ]

    def normalize(
        self,
        text: str,
        date_text: str | None = None,
        duration_text: str | None = None,
        location_name: str | None = None,
    ) -> str:
        title = text

        if date_text:
            title = title.replace(date_text, "", 1).strip()

        if duration_text:
            title = title.replace(duration_text, "", 1).strip()

        if location_name and title.lower().endswith(location_name.lower()):
            title = title[: -len(location_name)].strip()
            title = TRAILING_AT_RE.sub("", title).strip()

        for pattern in self._keyword_patterns:
            title = pattern.sub("", title).strip()

        title = re.sub(r"\s+", " ", title)
        title = LEADING_CONNECTOR_RE.sub("", title, count=1)
        title = TRAILING_CONNECTOR_RE.sub("", title, count=1).strip()

        return title or text.strip()
