import logging
from typing import Optional

from blogindex.exceptions import ValidationError
from blogindex.repos.posts_repo import SourceDocument
from blogindex.settings import settings

logger = logging.getLogger(__name__)


class ContentParser:
    def __init__(self, encoding: Optional[str] = None):
        self.encoding = encoding or settings.BLOG_POST_ENCODING

    def get_markdown_content(self, doc: SourceDocument) -> str:
        """Get the full markdown content of a document (decoded as text)."""
        try:
            raw = doc.path.read_bytes()
        except OSError as e:
            raise ValidationError(doc.id, "document", f"cannot read: {e}") from e
        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise ValidationError(
                doc.id, "document", f"cannot decode as {self.encoding}: {e.reason}"
            ) from e
        # front-matter fence must start at offset 0
        return text.removeprefix("\ufeff")
