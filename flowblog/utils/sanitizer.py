from __future__ import annotations
import html
import re
import uuid
from typing import List

import bleach
from bs4 import BeautifulSoup


class ContentSanitizer:
    """
    Strips markup outside the allow-list from markdown post bodies.

    Only markup is touched. Plain markdown text (``&``, ``<``, ``>``),
    code spans, fenced code blocks and ``<https://...>`` autolinks come back
    exactly as written.
    """

    ALLOWED_TAGS = [
        "p", "br", "hr",
        "strong", "em", "b", "i", "u", "s", "del",
        "h1", "h2", "h3", "h4", "h5", "h6",
        "ul", "ol", "li",
        "blockquote",
        "pre", "code",
        "a", "img",
    ]
    ALLOWED_ATTRS = {
        "a": ["href", "title", "target"],
        "img": ["src", "alt", "title"],
    }
    ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

    # markdown regions that hold literal text, not markup
    _VERBATIM = re.compile(
        r"(?P<fenced>^ {0,3}(?P<fence>`{3,}|~{3,})[^\n]*\n.*?(?:^ {0,3}(?P=fence)[`~]*[ \t]*$|\Z))"
        r"|(?P<span>(?<![\\`])(?P<ticks>`+)(?!`)[^\n]+?(?<!`)(?P=ticks)(?!`))"
        r"|(?P<autolink><(?:https?|mailto):[^\s<>\"'`\\]+>)",
        re.MULTILINE | re.DOTALL,
    )
    _BLANK_LINE = re.compile(r"\n[ \t]*\n")
    # a line opening with "<" starts a raw HTML block, where backticks are not code
    _HTML_LINE = re.compile(r"^ {0,3}<", re.MULTILINE)
    # "&lt;" bleach wrote for a "<" that cannot open a tag or comment
    _TEXT_LT = re.compile(r"&lt;(?![A-Za-z/!?])")

    def sanitize(self, text: str) -> str:
        if not text:
            return ""

        nonce = uuid.uuid4().hex
        amp_token = f"fbamp{nonce}x"
        kept: List[str] = []

        def _keep(m: re.Match) -> str:
            if not self._in_markdown_context(text, m.start()):
                return m.group(0)
            kept.append(m.group(0))
            return f"fbkeep{nonce}n{len(kept) - 1}x"

        body = self._VERBATIM.sub(_keep, text)
        # with no "&" left, every entity in bleach's output is one it added
        body = body.replace("&", amp_token)

        cleaned = bleach.clean(
            body,
            tags=self.ALLOWED_TAGS,
            attributes=self.ALLOWED_ATTRS,
            protocols=self.ALLOWED_PROTOCOLS,
            strip=True,
        )

        if "target=" in cleaned:
            soup = BeautifulSoup(cleaned, "html.parser")
            # target without rel gets the safe rel pair
            for a in soup.find_all("a"):
                if a.get("target") and not a.get("rel"):
                    a["rel"] = "noopener noreferrer"
            cleaned = str(soup)

        tokens = [f"fbkeep{nonce}n{i}x" for i in range(len(kept))]
        in_tag = {i for i, tok in enumerate(tokens) if self._inside_tag(cleaned, tok)}

        cleaned = self._TEXT_LT.sub("<", cleaned).replace("&gt;", ">")
        cleaned = cleaned.replace(amp_token, "&")
        for i, tok in enumerate(tokens):
            # a region that landed inside an allowed tag's attribute stays inert
            segment = html.escape(kept[i], quote=True) if i in in_tag else kept[i]
            cleaned = cleaned.replace(tok, segment)
        return cleaned

    def _in_markdown_context(self, text: str, start: int) -> bool:
        para_start = 0
        for blank in self._BLANK_LINE.finditer(text, 0, start):
            para_start = blank.end()
        return self._HTML_LINE.search(text, para_start, start) is None

    @staticmethod
    def _inside_tag(cleaned: str, token: str) -> bool:
        pos = cleaned.find(token)
        if pos < 0:
            return False
        # text "<" is escaped at this point, so a raw "<" always opens a tag
        return cleaned.rfind("<", 0, pos) > cleaned.rfind(">", 0, pos)
