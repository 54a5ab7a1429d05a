import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from slugify import slugify

from blogindex.exceptions import NotFoundError
from blogindex.settings import settings

logger = logging.getLogger(__name__)

_IGNORED_PREFIXES = ("_", ".")


@dataclass(frozen=True)
class SourceDocument:
    id: str  # path relative to the source root, posix form
    path: Path
    slug: str


def derive_slug(relative: Union[str, Path]) -> str:
    """Turn a document path relative to the source root into its slug."""
    parts = list(Path(relative).with_suffix("").parts)
    if len(parts) > 1 and parts[-1].lower() == "index":
        parts = parts[:-1]
    return "/".join(slugify(part) for part in parts)


class FilesystemPostsRepo:
    def __init__(
        self, root: Union[str, Path], extensions: Optional[Iterable[str]] = None
    ):
        self.root = Path(root)
        self.extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in (extensions or settings.BLOG_POST_EXTENSIONS)
        }

    def list_post_docs(self) -> List[SourceDocument]:
        if not self.root.exists():
            raise NotFoundError(self.root)
        if not self.root.is_dir():
            raise NotFoundError(self.root, "is not a directory")

        docs = []
        for path in self.root.rglob("*"):
            if not path.is_file() or not self._is_post(path):
                continue
            relative = path.relative_to(self.root)
            docs.append(
                SourceDocument(
                    id=relative.as_posix(), path=path, slug=derive_slug(relative)
                )
            )

        docs.sort(key=lambda doc: doc.id)
        logger.debug(f"Found {len(docs)} post documents under {self.root}")
        return docs

    def get_post_doc(self, slug: str) -> Optional[SourceDocument]:
        for doc in self.list_post_docs():
            if doc.slug == slug:
                return doc
        return None

    def _is_post(self, path: Path) -> bool:
        if path.suffix.lower() not in self.extensions:
            return False
        relative = path.relative_to(self.root)
        return not any(part.startswith(_IGNORED_PREFIXES) for part in relative.parts)
