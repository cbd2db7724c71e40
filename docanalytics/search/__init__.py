from .highlight import highlight, highlight_documents, is_blank


__all__ = ["highlight", "highlight_documents", "is_blank"]
