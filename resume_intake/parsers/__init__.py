from .read_pdf import extract_text, extract_text_async

__all__ = ["extract_text", "extract_text_async"]
