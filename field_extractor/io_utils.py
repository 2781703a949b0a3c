from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS = [".json", ".txt", ".log", ".md"]


def read_text_content(file_obj) -> str:
    """Read an upload as text without interpreting it.

    Accepts a file object (Gradio upload) or a path. Bytes are decoded as
    UTF-8 with any leading BOM dropped, so editors that save one do not
    leave a stray U+FEFF in front of the first key. Deciding whether the
    text is JSON, fenced JSON or a console dump is left to `parse_input`.
    """
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, bytes):
            content = content.decode('utf-8-sig')
        return content

    path = file_obj.name if hasattr(file_obj, 'name') else file_obj
    with open(path, 'r', encoding='utf-8-sig') as f:
        return f.read()


def read_upload(file_obj):
    """Return `(text, error_message)` for an upload; one of them is None."""
    try:
        return read_text_content(file_obj), None
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Could not read uploaded file: %s", e)
        return None, f"Error reading file: {str(e)}"
