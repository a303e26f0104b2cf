"""Tests for program YAML parsing, Markdown parsing and PDF export."""

from datetime import datetime, timezone

import pymupdf
import pytest

from fitcoach.core.errors import PdfRenderError
from fitcoach.core.pdf import renderer
from fitcoach.core.pdf.markdown import (
    Blockquote,
    CodeBlock,
    Heading,
    ListBlock,
    Paragraph,
    Rule,
    Segment,
    Table,
    parse_inline,
    parse_markdown,
)
from fitcoach.core.pdf.renderer import program_html, render_program_pdf
from fitcoach.core.pdf.storage import PdfStorage
from fitcoach.core.programs.yaml_loader import parse_program_yaml

VALID_PROGRAM = """\
name: Beginner Strength
description: Three full-body sessions per week
image_url: https://example.com/strength.png
template: |
  # Week 1
  - Squats: 3x8
metadata:
  difficulty: beginner
  duration: 8 weeks
  equipment: [barbell, rack]
  tags: [strength]
"""

PLAN = """\
# Beginner Strength

Train **three** days a week and rest *well*.

## Day 1
1. Squat 3x8
2. Bench press 3x8

| Exercise | Sets | Reps |
|----------|------|------|
| Deadlift | 1    | 5    |

> Warm up before every session.

---

```
tempo 3-1-1
```
"""


class TestParseProgramYaml:
    def test_valid_program(self):
        parsed = parse_program_yaml(VALID_PROGRAM)
        assert parsed.ok
        assert parsed.errors == []
        assert parsed.definition.name == "Beginner Strength"
        assert parsed.definition.template.startswith("# Week 1")
        assert parsed.definition.metadata.difficulty == "beginner"
        assert parsed.definition.metadata.equipment == ["barbell", "rack"]

    def test_invalid_yaml_reports_line(self):
        parsed = parse_program_yaml("name: ok\ndescription: [unclosed\n")
        assert not parsed.ok
        [error] = parsed.errors
        assert error.field == "yaml"
        assert error.message == "Invalid YAML format"
        assert error.line is not None and error.line >= 1

    def test_non_mapping_document(self):
        parsed = parse_program_yaml("- just\n- a list\n")
        assert [e.field for e in parsed.errors] == ["general"]

    def test_empty_document(self):
        assert parse_program_yaml("").errors[0].field == "general"

    def test_missing_fields_are_reported_by_name(self):
        parsed = parse_program_yaml("name: Only a name\n")
        assert not parsed.ok
        assert {e.field for e in parsed.errors} == {"description", "template"}

    def test_nested_fields_use_dotted_path(self):
        parsed = parse_program_yaml(
            VALID_PROGRAM.replace("difficulty: beginner", "difficulty: expert")
        )
        assert [e.field for e in parsed.errors] == ["metadata.difficulty"]

    def test_bad_image_url(self):
        parsed = parse_program_yaml(
            VALID_PROGRAM.replace("https://example.com/strength.png", "not a url")
        )
        [error] = parsed.errors
        assert error.field == "image_url"
        assert "Invalid url" in error.message


class TestMarkdown:
    def test_inline_styles(self):
        assert parse_inline("do **3 sets** of *slow* `squats`") == [
            Segment("do "),
            Segment("3 sets", bold=True),
            Segment(" of "),
            Segment("slow", italic=True),
            Segment(" "),
            Segment("squats", code=True),
        ]

    def test_snake_case_is_not_italic(self):
        assert parse_inline("use rest_time wisely") == [Segment("use rest_time wisely")]

    def test_block_structure(self):
        blocks = parse_markdown(PLAN)
        assert [type(b) for b in blocks] == [
            Heading,
            Paragraph,
            Heading,
            ListBlock,
            Table,
            Blockquote,
            Rule,
            CodeBlock,
        ]

        title, _, day, exercises, table, quote, _, code = blocks
        assert title.level == 1
        assert day.level == 2
        assert exercises.ordered
        assert [item[0].text for item in exercises.items] == [
            "Squat 3x8",
            "Bench press 3x8",
        ]
        assert [cell[0].text for cell in table.header] == ["Exercise", "Sets", "Reps"]
        assert len(table.rows) == 1
        assert quote.segments == [Segment("Warm up before every session.")]
        assert code.text == "tempo 3-1-1"

    def test_deep_headings_are_clamped(self):
        [heading] = parse_markdown("###### Notes")
        assert heading.level == 4

    def test_list_continuation_lines(self):
        [block] = parse_markdown("- Squat\n  with a pause\n- Lunge")
        assert [item[0].text for item in block.items] == [
            "Squat with a pause",
            "Lunge",
        ]

    def test_paragraph_lines_are_joined(self):
        [block] = parse_markdown("Rest 90 seconds\nbetween sets.")
        assert block.segments == [Segment("Rest 90 seconds between sets.")]


class TestRenderProgramPdf:
    def test_html_header_lines(self):
        created = datetime(2026, 3, 1, tzinfo=timezone.utc)
        document = program_html("Hello", "Strength <8 weeks>", "Sam", created)
        assert "<h1>Strength &lt;8 weeks&gt;</h1>" in document
        assert "Customized for: Sam" in document
        assert "Generated on: March 01, 2026" in document

    def test_renders_pdf_with_metadata(self):
        pdf = render_program_pdf(PLAN, "Beginner Strength", "Sam")
        assert pdf.startswith(b"%PDF")

        with pymupdf.open(stream=pdf, filetype="pdf") as doc:
            assert doc.page_count >= 1
            assert doc.metadata["title"] == "Beginner Strength"
            assert doc.metadata["author"] == "Sam"
            assert doc.metadata["subject"] == "Customized Workout Program"
            text = "".join(page.get_text() for page in doc)

        assert "Customized for: Sam" in text
        assert "Bench press 3x8" in text

    def test_long_plans_break_pages(self):
        plan = "\n\n".join(f"## Day {i}\n- Squat 5x5" for i in range(1, 80))
        pdf = render_program_pdf(plan, "Long", "Sam")
        with pymupdf.open(stream=pdf, filetype="pdf") as doc:
            assert doc.page_count > 1

    def test_layout_failure_raises_render_error(self, monkeypatch):
        def boom(_html):
            raise RuntimeError("layout exploded")

        monkeypatch.setattr(renderer, "_layout", boom)
        with pytest.raises(PdfRenderError):
            render_program_pdf(PLAN, "Broken", "Sam")


class TestPdfStorage:
    def test_save_read_delete(self, tmp_path):
        storage = PdfStorage(tmp_path)
        path = storage.save("usr_1", "upr_1", b"%PDF-1.7")
        assert path == "usr_1/upr_1.pdf"
        assert storage.read(path) == b"%PDF-1.7"

        storage.delete(path)
        assert storage.read(path) is None
        storage.delete(path)  # already gone

    def test_unsafe_ids_are_rejected(self, tmp_path):
        storage = PdfStorage(tmp_path)
        with pytest.raises(ValueError):
            storage.save("../etc", "upr_1", b"x")

    def test_paths_cannot_escape_root(self, tmp_path):
        storage = PdfStorage(tmp_path / "pdfs")
        with pytest.raises(ValueError):
            storage.read("../secret.pdf")
