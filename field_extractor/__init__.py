"""Core logic for the Field Extractor.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- parse pasted or uploaded dumps (JSON, fenced JSON, console output)
- compute per-field statistics and numbered-field groups
- compare two datasets field by field
- filter, select and export a field projection as CSV or JSON
"""
