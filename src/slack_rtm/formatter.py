"""Render Slack message markup into plain, human-readable text.

Slack escapes three characters in message bodies and wraps references in
angle brackets::

    &amp; &lt; &gt;                 -> & < >
    <@U024BE7LH>                    -> @alice          (user lookup)
    <#C024BE7LR>                    -> #general        (channel lookup)
    <#C024BE7LR|general>            -> #general        (explicit title)
    <!here>                         -> @here           (special mention)
    <!subteam^S012|@ops>            -> @ops            (title, "!" dropped)
    <https://example.com|Example>   -> Example         (link with label)
    <https://example.com>           -> https://example.com

Both kinds of token are matched by one alternation so that a bracket
containing ``&`` is consumed exactly once.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union

from .directory import Directory

logger = logging.getLogger(__name__)

# Escapes are tried first; reference and title are non-greedy so the first
# "|" splits them and the first ">" closes the token.
TOKEN_RE = re.compile(
    r"&(?P<escape>amp|lt|gt);"
    r"|<(?P<sign>[#@!])?(?P<reference>.*?)(?:\|(?P<title>.*?))?>"
)

ESCAPES = {"amp": "&", "lt": "<", "gt": ">"}

LOOKUP_SIGNS = ("@", "#")
SPECIAL_SIGN = "!"


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Escape:
    name: str


@dataclass(frozen=True)
class Bracket:
    sign: Optional[str]
    reference: str
    title: Optional[str] = None


Token = Union[Text, Escape, Bracket]


def tokenize(text: str) -> List[Token]:
    """Split ``text`` into literal runs, escapes and bracket tokens."""
    tokens: List[Token] = []
    pos = 0
    for m in TOKEN_RE.finditer(text):
        if m.start() > pos:
            tokens.append(Text(text[pos : m.start()]))
        if m.group("escape") is not None:
            tokens.append(Escape(m.group("escape")))
        else:
            tokens.append(Bracket(m.group("sign"), m.group("reference"), m.group("title")))
        pos = m.end()
    if pos < len(text):
        tokens.append(Text(text[pos:]))
    return tokens


def _lookup_name(reference: str, directory: Directory) -> Optional[str]:
    entity = directory.lookup(reference)
    if entity is None:
        return None
    name = entity.get("name")
    if not isinstance(name, str):
        logger.debug("Entity %s has no usable name; leaving reference as-is", reference)
        return None
    return name


def render_token(token: Token, directory: Directory) -> str:
    if isinstance(token, Text):
        return token.text
    if isinstance(token, Escape):
        return ESCAPES[token.name]

    sign = token.sign or ""
    if token.title is not None:
        if sign == SPECIAL_SIGN:
            return token.title
        return sign + token.title
    if sign in LOOKUP_SIGNS:
        name = _lookup_name(token.reference, directory)
        return sign + (name if name is not None else token.reference)
    if sign == SPECIAL_SIGN:
        return "@" + token.reference
    return token.reference


def resolve(text: str, directory: Directory) -> str:
    """Return ``text`` with escapes decoded and references resolved.

    Never raises on malformed markup: anything the grammar does not match
    is copied through, and unknown ids keep their raw form (``@U123``).
    """
    if not text:
        return text
    return "".join(render_token(tok, directory) for tok in tokenize(text))
