"""
String-Aware JSON Scanner

Low-level helpers for recovering JSON from model output:
- strip_code_fences: remove a surrounding markdown code fence
- find_balanced_span: locate the closer matching an opening brace/bracket
- repair_truncated_json: make a truncated document syntactically closable

All of these are purely syntactic. None of them know the result schema.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ScanState(Enum):
    """Lexical state of the scanner."""
    PLAIN = "plain"
    IN_STRING = "in_string"
    ESCAPE_PENDING = "escape_pending"


_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = {"}", "]"}


@dataclass
class ScanResult:
    """State of a scan that ran to the end of the text."""
    state: ScanState
    open_stack: List[str] = field(default_factory=list)  # unclosed openers, outermost first
    string_start: Optional[int] = None  # opening quote of the unterminated string
    last_string: Optional[Tuple[int, int]] = None  # quote positions of the last complete string

    @property
    def is_complete(self) -> bool:
        return self.state is ScanState.PLAIN and not self.open_stack


def scan_json(text: str, start: int = 0) -> ScanResult:
    """
    Scan text tracking string state and bracket nesting.

    Args:
        text: Text to scan
        start: Index to start scanning at

    Returns:
        ScanResult describing where the scan ended up
    """
    result = ScanResult(state=ScanState.PLAIN)
    state = ScanState.PLAIN
    stack: List[str] = []
    string_start = None

    for i in range(start, len(text)):
        char = text[i]

        if state is ScanState.ESCAPE_PENDING:
            state = ScanState.IN_STRING
            continue

        if state is ScanState.IN_STRING:
            if char == "\\":
                state = ScanState.ESCAPE_PENDING
            elif char == '"':
                state = ScanState.PLAIN
                result.last_string = (string_start, i)
                string_start = None
            continue

        if char == '"':
            state = ScanState.IN_STRING
            string_start = i
        elif char in _OPENERS:
            stack.append(char)
        elif char in _CLOSERS and stack:
            stack.pop()

    result.state = state
    result.open_stack = stack
    result.string_start = string_start
    return result


def find_balanced_span(text: str, start: int) -> Optional[int]:
    """
    Find the index of the closer matching the opener at `start`.

    Braces and brackets inside string literals (including escaped quotes)
    are ignored.

    Args:
        text: Text to scan
        start: Index of an opening '{' or '['

    Returns:
        Index of the matching closer, or None if the span is unterminated
    """
    if start >= len(text) or text[start] not in _OPENERS:
        return None

    state = ScanState.PLAIN
    depth = 0

    for i in range(start, len(text)):
        char = text[i]

        if state is ScanState.ESCAPE_PENDING:
            state = ScanState.IN_STRING
        elif state is ScanState.IN_STRING:
            if char == "\\":
                state = ScanState.ESCAPE_PENDING
            elif char == '"':
                state = ScanState.PLAIN
        elif char == '"':
            state = ScanState.IN_STRING
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i

    return None


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    stripped = text.strip()
    if stripped.startswith("```json"):
        stripped = stripped[7:]
    elif stripped.startswith("```"):
        stripped = stripped[3:]
    if stripped.endswith("```"):
        stripped = stripped[:-3]
    return stripped.strip()


# ============================================================================
# TRUNCATION REPAIR
# ============================================================================

# Prefix of true/false/null cut off mid-literal
_PARTIAL_LITERAL = re.compile(r"(?<=[:,\[\s])(?:t|tr|tru|f|fa|fal|fals|n|nu|nul)$")
# Number cut off after a sign, decimal point or exponent marker
_PARTIAL_NUMBER = re.compile(r"(?:(?<=\d)[.eE+-]+|(?<=[:,\[\s])-)$")
_DANGLING_COLON = re.compile(r"\s*:\s*")


def _trim_dangling(body: str) -> str:
    """Remove one incomplete trailing token, if any."""
    stripped = body.rstrip()

    if stripped.endswith(","):
        return stripped[:-1]

    for pattern in (_PARTIAL_LITERAL, _PARTIAL_NUMBER):
        match = pattern.search(stripped)
        if match:
            return stripped[:match.start()]

    scan = scan_json(stripped)
    if scan.state is ScanState.PLAIN and scan.last_string is not None:
        quote_start, quote_end = scan.last_string
        tail = stripped[quote_end + 1:]

        # "key": with the value missing
        if _DANGLING_COLON.fullmatch(tail):
            return stripped[:quote_start]

        # Bare key at the end of an object
        if not tail and scan.open_stack and scan.open_stack[-1] == "{":
            if stripped[:quote_start].rstrip().endswith(("{", ",")):
                return stripped[:quote_start]

    return stripped


def repair_truncated_json(text: str) -> str:
    """
    Make truncated JSON closable.

    Cuts an unterminated trailing string back to its opening quote, strips a
    dangling key, partial literal or trailing comma, then appends closers for
    every unclosed brace/bracket in nesting order.

    Text that is already balanced and terminated is returned unchanged.

    Args:
        text: Possibly truncated JSON text

    Returns:
        Repaired text (may still fail to parse if the input was not JSON)
    """
    scan = scan_json(text)
    if scan.is_complete:
        return text

    body = text
    if scan.state is not ScanState.PLAIN:
        body = body[:scan.string_start]

    while True:
        trimmed = _trim_dangling(body)
        if trimmed == body:
            break
        body = trimmed

    closers = "".join(_OPENERS[opener] for opener in reversed(scan_json(body).open_stack))
    return body + closers
