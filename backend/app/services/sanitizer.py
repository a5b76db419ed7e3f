import re

# Opening fence with an optional language tag (```mermaid, ```mmd, ...)
_OPENING_FENCE = re.compile(r"^```[\w-]*[ \t]*(?:\r?\n|$)")
# Closing fence on its own line
_CLOSING_FENCE = re.compile(r"(?:^|\r?\n)[ \t]*```$")
# Closing fence glued to the last line; only valid once an opening fence was removed
_INLINE_CLOSING_FENCE = re.compile(r"\s*```$")


def sanitize_markup(text: str | None) -> str:
    """
    Strip a fenced-block wrapper from generated text and trim whitespace.

    Text without fences is only trimmed, so the function is idempotent:
    sanitize_markup(sanitize_markup(x)) == sanitize_markup(x).
    """
    if not text:
        return ""
    cleaned = text.strip()
    cleaned, opened = _OPENING_FENCE.subn("", cleaned, count=1)
    closing = _INLINE_CLOSING_FENCE if opened else _CLOSING_FENCE
    cleaned = closing.sub("", cleaned, count=1)
    return cleaned.strip()
