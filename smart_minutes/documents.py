"""Render generated minutes as Word documents."""

import io
from pathlib import Path

from docx import Document

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
AUTHOR = "Smart Minutes App"
DESCRIPTION = "Auto-generated summary of transcribed audio."


def build_minutes_document(summary_text: str, template_name: str) -> bytes:
    """Build a ``.docx`` with one paragraph per non‑blank summary line."""
    doc = Document()
    props = doc.core_properties
    props.author = AUTHOR
    props.title = f"Minutes of the Meeting - {template_name}"
    props.comments = DESCRIPTION
    for line in summary_text.split("\n"):
        if line.strip():
            doc.add_paragraph(line)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def document_filename(audio_file_name: str, template_name: str, timestamp_ms: int) -> str:
    """``<audio base>-<template>-<timestamp>.docx``"""
    base = Path(audio_file_name).stem or audio_file_name
    return f"{base}-{template_name}-{timestamp_ms}.docx"
