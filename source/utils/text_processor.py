import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import urljoin, urlparse

from bs4 import Comment, NavigableString, Tag

from utils.locale_patterns import (
    CARD_LABEL_CONTRACT_TYPE,
    CARD_LABEL_PLACE_OF_WORK,
    CARD_LABEL_WORKLOAD,
    CARD_METADATA_LABELS,
    EASY_APPLY_MARKER,
    RELATIVE_TIME_PATTERN,
)

# =============================================================================
# Text Processing Utilities
# =============================================================================


@dataclass
class CardFields:
    title: str = ""
    company: str = ""
    location: str = ""
    workload: str = ""
    contract_type: str = ""
    posted_text: str = ""


class TextProcessor:
    ENTITY_REPLACEMENTS = (
        ("&nbsp;", " "),
        ("&amp;", "&"),
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&quot;", '"'),
        ("&#039;", "'"),
        ("&#x27;", "'"),
    )
    NUMERIC_ENTITY = re.compile(r"&#(\d+);")
    TAG_PATTERN = re.compile(r"<[^>]*>")
    WHITESPACE = re.compile(r"\s+")

    # Elements that start a new line in rendered text.
    BLOCK_TAGS = frozenset({
        "address", "article", "aside", "blockquote", "dd", "details", "div",
        "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
        "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "main",
        "nav", "ol", "p", "pre", "section", "summary", "table", "tr", "ul",
    })
    SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "svg"})

    @classmethod
    def decode_entities(cls, text: Optional[str]) -> str:
        if not text:
            return ""
        for entity, literal in cls.ENTITY_REPLACEMENTS:
            text = text.replace(entity, literal)
        return cls.NUMERIC_ENTITY.sub(cls._decode_numeric, text)

    @staticmethod
    def _decode_numeric(match: re.Match) -> str:
        try:
            return chr(int(match.group(1)))
        except (ValueError, OverflowError):
            return match.group(0)

    @classmethod
    def strip_html(cls, html: Optional[str]) -> str:
        text = cls.decode_entities(cls.TAG_PATTERN.sub(" ", str(html or "")))
        return cls.WHITESPACE.sub(" ", text).strip()

    @classmethod
    def clean_value(cls, value: Optional[str]) -> str:
        return cls.WHITESPACE.sub(" ", (value or "").replace("\u00a0", " ")).strip()

    @classmethod
    def normalize_label(cls, label: Optional[str]) -> str:
        label = cls.WHITESPACE.sub(" ", label or "")
        return re.sub(r"\s*:\s*$", "", label).strip().lower()

    @classmethod
    def canonical_key(cls, label: Optional[str]) -> str:
        return re.sub(r"[^a-z]", "", cls.normalize_label(label))

    @staticmethod
    def label_value_pattern(label: str, require_colon: bool = False) -> re.Pattern:
        """`Label: value` at the start of a single-line text block.

        Without `require_colon` the label may also be followed by whitespace,
        but only as a whole word: "Contract Permanent" matches "Contract",
        "Contracts are renewed" does not.
        """
        separator = r"\s*:\s*" if require_colon else r"(?:\s*:\s*|\b\s+)"
        return re.compile(r"^\s*" + re.escape(label) + separator + r"(.+)$", re.IGNORECASE)

    @classmethod
    def strip_label_prefix(cls, value: Optional[str], label: str) -> str:
        pattern = re.compile(r"^\s*" + re.escape(label) + r"\s*:?\s*", re.IGNORECASE)
        return pattern.sub("", cls.clean_value(value), count=1).strip()

    @staticmethod
    def count_words(text: str) -> int:
        return len(text.split())

    @staticmethod
    def resolve_url(href: Optional[str], base_url: str) -> str:
        href = (href or "").strip()
        if not href:
            return ""
        url = href if href.startswith("http") else urljoin(base_url, href)
        if urlparse(url).scheme not in ("http", "https"):
            return ""
        return url

    @classmethod
    def inner_text(cls, element: Optional[Tag]) -> str:
        """Approximates the browser's innerText for a parsed element."""
        if element is None:
            return ""
        parts: list[str] = []

        def walk(node: Tag) -> None:
            for child in node.children:
                if isinstance(child, Comment):
                    continue
                if isinstance(child, NavigableString):
                    parts.append(cls.WHITESPACE.sub(" ", str(child)))
                    continue
                if not isinstance(child, Tag) or child.name in cls.SKIP_TAGS:
                    continue
                if child.name == "br":
                    parts.append("\n")
                    continue
                is_block = child.name in cls.BLOCK_TAGS
                if is_block:
                    parts.append("\n")
                walk(child)
                if is_block:
                    parts.append("\n")

        walk(element)
        lines = (
            re.sub(r"[^\S\n]+", " ", line).strip()
            for line in "".join(parts).split("\n")
        )
        return "\n".join(line for line in lines if line)

    @staticmethod
    def is_card_metadata_line(line: str) -> bool:
        return (
            any(label in line for label in CARD_METADATA_LABELS)
            or EASY_APPLY_MARKER in line.lower()
            or bool(RELATIVE_TIME_PATTERN.search(line))
        )

    @classmethod
    def parse_card_text_to_fields(cls, card_text: Optional[str]) -> CardFields:
        lines = [line.strip() for line in str(card_text or "").split("\n")]
        lines = [line for line in lines if line]
        if not lines:
            return CardFields()

        company = next(
            (line for line in lines[1:] if not cls.is_card_metadata_line(line)), ""
        )

        def find_after(label: str) -> str:
            line = next(
                (line for line in lines if line.lower().startswith(label.lower())), None
            )
            if line is None:
                return ""
            return re.sub(r"^" + re.escape(label) + r"\s*", "", line, flags=re.IGNORECASE).strip()

        # Posting age trails the card, so scan from the end.
        posted_text = next(
            (line for line in reversed(lines) if RELATIVE_TIME_PATTERN.search(line)), ""
        )

        return CardFields(
            title=lines[0],
            company=company,
            location=find_after(CARD_LABEL_PLACE_OF_WORK),
            workload=find_after(CARD_LABEL_WORKLOAD),
            contract_type=find_after(CARD_LABEL_CONTRACT_TYPE),
            posted_text=posted_text,
        )


def first_match(strategies: Iterable[Callable[..., Optional[str]]], *args) -> str:
    """Runs extraction strategies in order; the first non-empty result wins."""
    for strategy in strategies:
        value = strategy(*args)
        if value:
            return value
    return ""
