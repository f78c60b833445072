"""Shared pytest fixtures for Repetition Finder tests."""

import io
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Text Fixtures
# ============================================================================

@pytest.fixture
def cat_text():
    """Three lines where the first and last sentence are identical."""
    return (
        "The cat sat on the old wooden mat quietly.\n"
        "Something else happened here today.\n"
        "The cat sat on the old wooden mat quietly."
    )


@pytest.fixture
def cat_text_total_repeated():
    """1 repeated sentence + 23 repeated phrase windows (3..8 tokens, >= 12 chars)."""
    return 24


# ============================================================================
# Document Fixtures
# ============================================================================

@pytest.fixture
def docx_bytes():
    """Build a .docx whose paragraphs repeat the same sentence on two lines."""
    from docx import Document

    document = Document()
    document.add_paragraph("Quarterly revenue grew faster than anyone expected.")
    document.add_paragraph("Costs stayed flat across every region.")
    document.add_paragraph("Quarterly revenue grew faster than anyone expected.")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def rtf_bytes():
    return (
        b"{\\rtf1\\ansi\\deff0 "
        b"The meeting will start at nine sharp.\\par "
        b"Please bring the printed agenda.\\par "
        b"The meeting will start at nine sharp.\\par "
        b"}"
    )


@pytest.fixture
def html_bytes():
    return (
        b"<html><head><title>Notes</title>"
        b"<style>p { color: red; }</style>"
        b"<script>var tracking = 'The script text should never be analyzed';</script>"
        b"</head><body>\n"
        b"<p>Our team shipped the new release on time.</p>\n"
        b"<p>Nobody worked over the weekend.</p>\n"
        b"<p>Our team shipped the new release on time.</p>\n"
        b"</body></html>"
    )
