"""Extract reverse-proxy server blocks from raw NGINX config text.

Only one structural pattern is understood: a ``server { ... }`` block with a
``server_name`` directive and a ``proxy_pass http://localhost:PORT;``.
Anything else in the file is left alone and simply not reported.
"""

from __future__ import annotations

import re
from typing import Iterator

from orchestr8_common import BODY_SIZE_NOT_SET, MANAGED_TAG, ServerBlock

_SERVER_OPEN_RE = re.compile(r"(?<![\w$.-])server\s*\{")
_SERVER_NAME_RE = re.compile(r"(?<![\w$])server_name\s+([^;]+);")
_PROXY_PASS_RE = re.compile(r"(?<![\w$])proxy_pass\s+http://localhost:(\d+)\s*;")
_BODY_SIZE_RE = re.compile(r"(?<![\w$])client_max_body_size\s+([^;]+);")
_MANAGED_RE = re.compile(rf"#\s*{re.escape(MANAGED_TAG)}:\s*service=(\S+)")
_COMMENT_RE = re.compile(r"#[^\n]*")


def _in_comment(content: str, pos: int) -> bool:
    """True when ``pos`` follows an unquoted ``#`` on its line."""
    quote: str | None = None
    i = content.rfind("\n", 0, pos) + 1
    while i < pos:
        ch = content[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "#":
            return True
        i += 1
    return False


def _find_block_end(content: str, open_idx: int) -> int | None:
    """Return the index just past the brace that closes ``content[open_idx]``.

    Braces inside comments and quoted strings are ignored. Returns None when
    the block is never closed.
    """
    depth = 0
    quote: str | None = None
    i = open_idx
    n = len(content)
    while i < n:
        ch = content[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch == "#":
            nl = content.find("\n", i)
            if nl == -1:
                return None
            i = nl
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None


def iter_server_spans(content: str) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` offsets of every balanced ``server { ... }`` block."""
    pos = 0
    while True:
        match = _SERVER_OPEN_RE.search(content, pos)
        if match is None:
            return
        if _in_comment(content, match.start()):
            pos = match.end()
            continue
        end = _find_block_end(content, match.end() - 1)
        if end is None:
            # Unbalanced tail: nothing after this point can be trusted.
            return
        yield match.start(), end
        pos = end


def _parse_block(raw: str, start: int) -> ServerBlock | None:
    managed = _MANAGED_RE.search(raw)
    body = _COMMENT_RE.sub("", raw)

    name = _SERVER_NAME_RE.search(body)
    if name is None:
        return None
    proxy = _PROXY_PASS_RE.search(body)
    if proxy is None:
        return None
    size = _BODY_SIZE_RE.search(body)

    return ServerBlock(
        server_name=name.group(1).strip(),
        proxy_port=proxy.group(1),
        client_max_body_size=size.group(1).strip() if size else BODY_SIZE_NOT_SET,
        raw_text=raw,
        managed_service=managed.group(1) if managed else None,
        start=start,
        end=start + len(raw),
    )


def parse(content: str) -> list[ServerBlock]:
    """Parse config text into server-block records. Never raises."""
    blocks: list[ServerBlock] = []
    for start, end in iter_server_spans(content):
        block = _parse_block(content[start:end], start)
        if block is not None:
            blocks.append(block)
    return blocks


def find_by_port(blocks: list[ServerBlock], port: str) -> ServerBlock | None:
    """Return the first block forwarding to ``port``."""
    for block in blocks:
        if block.proxy_port == port:
            return block
    return None
