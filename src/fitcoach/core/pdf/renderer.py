"""Render a customized program (Markdown) to PDF with pymupdf's Story.

Blocks from ``parse_markdown`` are turned into a restricted HTML
subset; ``pymupdf.Story`` lays it out on A4 pages and breaks pages as
needed.
"""

import html
import io
import logging
import time
from datetime import datetime, timezone

from fitcoach.core.errors import PdfRenderError
from fitcoach.core.service.metrics import PDF_RENDER_SECONDS, PDF_RENDERS_TOTAL
from fitcoach.infra.telemetry import ATTR_PDF_BYTES, SPAN_PDF_RENDER, tracer

from .markdown import (
    Block,
    Blockquote,
    CodeBlock,
    Heading,
    Inline,
    ListBlock,
    Paragraph,
    Rule,
    Table,
    parse_markdown,
)

logger = logging.getLogger(__name__)

PAGE_FORMAT = "a4"
PAGE_MARGIN = 50  # points

PDF_SUBJECT = "Customized Workout Program"
PDF_KEYWORDS = "fitness, workout, program, customized"
PDF_CREATOR = "fitcoach"

STYLESHEET = """
body { font-family: sans-serif; font-size: 12px; color: #111827; }
h1 { font-size: 24px; color: #4F46E5; margin-bottom: 10px; }
h2 { font-size: 20px; color: #4F46E5; margin-bottom: 8px; }
h3 { font-size: 16px; margin-bottom: 6px; }
h4 { font-size: 14px; margin-bottom: 6px; }
p { margin-bottom: 8px; }
li { margin-bottom: 3px; }
table { border-collapse: collapse; margin-bottom: 8px; }
th { background-color: #F9FAFB; font-weight: bold; }
th, td { border: 1px solid #E5E7EB; padding: 3px; font-size: 10px; }
blockquote { color: #4B5563; margin-left: 20px; font-style: italic; }
pre, code { font-family: monospace; background-color: #F3F4F6; }
.meta { color: #4B5563; font-size: 10px; }
"""


def _inline_html(segments: Inline) -> str:
    out = []
    for seg in segments:
        text = html.escape(seg.text)
        if seg.code:
            text = f"<code>{text}</code>"
        if seg.italic:
            text = f"<i>{text}</i>"
        if seg.bold:
            text = f"<b>{text}</b>"
        out.append(text)
    return "".join(out)


def _block_html(block: Block) -> str:
    if isinstance(block, Heading):
        return f"<h{block.level}>{_inline_html(block.segments)}</h{block.level}>"
    if isinstance(block, Paragraph):
        return f"<p>{_inline_html(block.segments)}</p>"
    if isinstance(block, ListBlock):
        tag = "ol" if block.ordered else "ul"
        items = "".join(f"<li>{_inline_html(item)}</li>" for item in block.items)
        return f"<{tag}>{items}</{tag}>"
    if isinstance(block, Table):
        header = "".join(f"<th>{_inline_html(c)}</th>" for c in block.header)
        rows = "".join(
            "<tr>" + "".join(f"<td>{_inline_html(c)}</td>" for c in row) + "</tr>"
            for row in block.rows
        )
        return f"<table><tr>{header}</tr>{rows}</table>"
    if isinstance(block, Blockquote):
        return f"<blockquote>{_inline_html(block.segments)}</blockquote>"
    if isinstance(block, CodeBlock):
        return f"<pre>{html.escape(block.text)}</pre>"
    if isinstance(block, Rule):
        return "<hr/>"
    raise TypeError(f"Unknown block type: {type(block).__name__}")


def program_html(markdown: str, title: str, author: str, created_at: datetime) -> str:
    """HTML document for the PDF: title, header lines, then the plan."""
    header = (
        f"<h1>{html.escape(title)}</h1>"
        f'<p class="meta">Customized for: {html.escape(author)}</p>'
        f'<p class="meta">Generated on: {created_at.strftime("%B %d, %Y")}</p>'
        "<hr/>"
    )
    body = "".join(_block_html(block) for block in parse_markdown(markdown))
    return f"<body>{header}{body}</body>"


def _layout(document_html: str) -> bytes:
    import pymupdf  # heavy import, only needed when rendering

    story = pymupdf.Story(html=document_html, user_css=STYLESHEET)
    mediabox = pymupdf.paper_rect(PAGE_FORMAT)
    where = mediabox + (PAGE_MARGIN, PAGE_MARGIN, -PAGE_MARGIN, -PAGE_MARGIN)

    buffer = io.BytesIO()
    writer = pymupdf.DocumentWriter(buffer)
    more = True
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
    writer.close()
    return buffer.getvalue()


def _with_metadata(pdf: bytes, title: str, author: str) -> bytes:
    import pymupdf

    with pymupdf.open(stream=pdf, filetype="pdf") as doc:
        doc.set_metadata(
            {
                "title": title,
                "author": author,
                "subject": PDF_SUBJECT,
                "keywords": PDF_KEYWORDS,
                "creator": PDF_CREATOR,
            }
        )
        return doc.tobytes()


def render_program_pdf(
    markdown: str,
    title: str,
    author: str,
    created_at: datetime | None = None,
) -> bytes:
    """Render *markdown* to PDF bytes.

    Raises ``PdfRenderError`` when layout or writing fails.
    """
    created_at = created_at or datetime.now(timezone.utc)
    start = time.monotonic()
    with tracer.start_as_current_span(SPAN_PDF_RENDER) as span:
        try:
            pdf = _with_metadata(
                _layout(program_html(markdown, title, author, created_at)),
                title,
                author,
            )
        except Exception as exc:
            PDF_RENDERS_TOTAL.labels(status="error").inc()
            span.record_exception(exc)
            logger.warning("PDF rendering failed for %r", title, exc_info=True)
            raise PdfRenderError("Failed to generate PDF") from exc
        span.set_attribute(ATTR_PDF_BYTES, len(pdf))

    PDF_RENDERS_TOTAL.labels(status="ok").inc()
    PDF_RENDER_SECONDS.observe(time.monotonic() - start)
    logger.debug("Rendered PDF %r (%d bytes)", title, len(pdf))
    return pdf
