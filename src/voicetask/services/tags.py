import re

TAG_RE = re.compile(r"#(\w+)|@(\w+)")


def extract_tags(text: str) -> list[str]:
    """Hashtags and @mentions, without the leading symbol, in order."""
    return [match.group(0)[1:] for match in TAG_RE.finditer(text)]
