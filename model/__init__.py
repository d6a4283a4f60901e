from model.document import Document, Listener
from model.writer import Writer

__all__ = ["Document", "Listener", "Writer"]
