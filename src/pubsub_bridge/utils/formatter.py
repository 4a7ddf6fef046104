from __future__ import annotations

"""HTML rendering for the operator publish form.
Topic names come from the closed enumeration; the status text is escaped."""

from html import escape
from typing import Iterable, Optional

FORM_PAGE = (
    "<!DOCTYPE html>"
    "<html>"
    "<head><title>{title}</title></head>"
    "<body>"
    "<form>"
    "<br><br><b>Topic:</b><br><br>"
    "<select name='topic'>{options}</select>"
    "<br><br><b>Message:</b><br><br>"
    "<input type='text' size='50' name='message'/>"
    "<br><br>"
    "<input type='submit' value='Submit'/>"
    "</form>"
    "<br><br><b>Status:</b><br><br>"
    "<textarea rows='4' cols='50'>{status}</textarea>"
    "</body>"
    "</html>"
)


def clean_param(value: Optional[str]) -> Optional[str]:
    """Trim a request parameter; blank values count as missing."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def format_topics(topics: Iterable) -> str:
    return "[" + ", ".join(str(t) for t in topics) + "]"


def help_status(topics: Iterable) -> str:
    return "Topic is required, Message is optional.\nValid topics: " + format_topics(topics)


def render_options(topics: Iterable) -> str:
    return "".join(f"<option>{escape(str(t))}</option>" for t in topics)


def render_form(topics: Iterable, status: str, title: str = "PubSub Admin Bridge") -> str:
    return FORM_PAGE.format(
        title=escape(title),
        options=render_options(topics),
        status=escape(status),
    )
