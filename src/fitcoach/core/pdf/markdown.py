"""A small Markdown block parser for program PDFs.

Covers what LLM-customized workout plans actually contain: headings
(levels 1-4, deeper levels are clamped), paragraphs, ordered and
unordered lists, pipe tables, blockquotes, fenced code and horizontal
rules, with ``**bold**``, ``*italic*`` / ``_italic_`` and ```code```
inline spans.  Anything else is treated as paragraph text.
"""

import re
from dataclasses import dataclass, field

MAX_HEADING_LEVEL = 4

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*$")
_RULE_RE = re.compile(r"^(-{3,}|\*{3,}|_{3,})$")
_UL_RE = re.compile(r"^[-*+]\s+(.*)$")
_OL_RE = re.compile(r"^\d+[.)]\s+(.*)$")
_TABLE_SEPARATOR_RE = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")
_FENCE = "```"

_INLINE_RE = re.compile(
    r"(\*\*[^*]+\*\*|__[^_]+__|`[^`]+`|\*[^*\s][^*]*\*|(?<!\w)_[^_\s][^_]*_(?!\w))"
)


@dataclass(frozen=True)
class Segment:
    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False


Inline = list[Segment]


@dataclass
class Heading:
    level: int
    segments: Inline


@dataclass
class Paragraph:
    segments: Inline


@dataclass
class ListBlock:
    ordered: bool
    items: list[Inline] = field(default_factory=list)


@dataclass
class Table:
    header: list[Inline]
    rows: list[list[Inline]] = field(default_factory=list)


@dataclass
class Blockquote:
    segments: Inline


@dataclass
class CodeBlock:
    text: str


@dataclass
class Rule:
    pass


Block = Heading | Paragraph | ListBlock | Table | Blockquote | CodeBlock | Rule


def parse_inline(text: str) -> Inline:
    """Split *text* into plain and styled segments."""
    segments: Inline = []
    for part in _INLINE_RE.split(text):
        if not part:
            continue
        if (part.startswith("**") or part.startswith("__")) and len(part) > 4:
            segments.append(Segment(part[2:-2], bold=True))
        elif part.startswith("`") and len(part) > 2:
            segments.append(Segment(part[1:-1], code=True))
        elif part[0] in "*_" and part[-1] == part[0] and len(part) > 2:
            segments.append(Segment(part[1:-1], italic=True))
        else:
            segments.append(Segment(part))
    return segments


def _split_row(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip().strip("|").split("|")]


def _starts_block(line: str) -> bool:
    return bool(
        line.startswith(_FENCE)
        or line.startswith(">")
        or line.startswith("|")
        or _HEADING_RE.match(line)
        or _RULE_RE.match(line)
        or _UL_RE.match(line)
        or _OL_RE.match(line)
    )


def parse_markdown(text: str) -> list[Block]:
    """Parse *text* into a flat list of blocks, in document order."""
    lines = text.splitlines()
    blocks: list[Block] = []
    i = 0

    while i < len(lines):
        line = lines[i].strip()

        if not line:
            i += 1
            continue

        if line.startswith(_FENCE):
            i += 1
            code: list[str] = []
            while i < len(lines) and not lines[i].strip().startswith(_FENCE):
                code.append(lines[i])
                i += 1
            blocks.append(CodeBlock("\n".join(code)))
            i += 1  # closing fence
            continue

        if m := _HEADING_RE.match(line):
            level = min(len(m.group(1)), MAX_HEADING_LEVEL)
            blocks.append(Heading(level, parse_inline(m.group(2))))
            i += 1
            continue

        if _RULE_RE.match(line):
            blocks.append(Rule())
            i += 1
            continue

        if line.startswith(">"):
            quoted: list[str] = []
            while i < len(lines) and lines[i].strip().startswith(">"):
                quoted.append(lines[i].strip().lstrip(">").strip())
                i += 1
            blocks.append(Blockquote(parse_inline(" ".join(q for q in quoted if q))))
            continue

        if line.startswith("|"):
            rows: list[list[Inline]] = []
            while i < len(lines) and lines[i].strip().startswith("|"):
                row = lines[i].strip()
                if not _TABLE_SEPARATOR_RE.match(row):
                    rows.append([parse_inline(c) for c in _split_row(row)])
                i += 1
            if rows:
                blocks.append(Table(header=rows[0], rows=rows[1:]))
            continue

        item_re = _UL_RE if _UL_RE.match(line) else _OL_RE if _OL_RE.match(line) else None
        if item_re is not None:
            items: list[str] = []
            while i < len(lines):
                current = lines[i].strip()
                if m := item_re.match(current):
                    items.append(m.group(1))
                elif current and items and not _starts_block(current):
                    items[-1] += " " + current  # continuation line
                else:
                    break
                i += 1
            blocks.append(
                ListBlock(
                    ordered=item_re is _OL_RE,
                    items=[parse_inline(item) for item in items],
                )
            )
            continue

        paragraph = [line]
        i += 1
        while i < len(lines):
            current = lines[i].strip()
            if not current or _starts_block(current):
                break
            paragraph.append(current)
            i += 1
        blocks.append(Paragraph(parse_inline(" ".join(paragraph))))

    return blocks
