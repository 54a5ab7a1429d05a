import textwrap
from pathlib import Path

import pytest

from blogindex.repos.posts_repo import SourceDocument, derive_slug


def make_doc(doc_id: str, root: Path = Path("posts")) -> SourceDocument:
    return SourceDocument(id=doc_id, path=root / doc_id, slug=derive_slug(doc_id))


def post_markdown(
    pub_date="2025-11-30",
    *,
    title="Dependency Inversion in Practice",
    tags="[solid, architecture]",
    body="Depend on abstractions, not on concretions.",
    extra="",
) -> str:
    """Build a complete post document; pass ``None`` to leave a key out."""
    lines = ["---"]
    if pub_date is not None:
        lines.append(f"pubDate: {pub_date}")
    lines += [
        "author: Jane Writer",
        f"title: {title}",
        "description: Notes on the D in SOLID",
        "image:",
        "  url: /images/solid.png",
        "  alt: Five letters on a whiteboard",
    ]
    if tags is not None:
        lines.append(f"tags: {tags}")
    if extra:
        lines.append(textwrap.dedent(extra).strip())
    lines += ["---", body]
    return "\n".join(lines) + "\n"


class FakeParser:
    """
    Minimal content parser stand-in keyed by document id.
    """

    def __init__(self, content_by_id: dict[str, str]):
        self.content_by_id = content_by_id
        self.calls = []

    def get_markdown_content(self, doc: SourceDocument) -> str:
        self.calls.append(doc.id)
        raw = self.content_by_id.get(doc.id, "")
        return textwrap.dedent(raw).lstrip()


@pytest.fixture
def posts_dir(tmp_path):
    root = tmp_path / "blog"
    root.mkdir()
    return root


@pytest.fixture
def write_post(posts_dir):
    def _write(relative: str, content: str) -> Path:
        path = posts_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
