import logging
from collections import Counter, defaultdict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import frontmatter
import pydantic
import yaml

from blogindex.exceptions import DuplicateSlugError, ValidationError
from blogindex.repos.posts_repo import FilesystemPostsRepo, SourceDocument
from blogindex.schemas.post import ErrorPolicy, LoadResult, Post
from blogindex.services.content_parser import ContentParser
from blogindex.settings import settings
from blogindex.utils import calculate_reading_time

logger = logging.getLogger(__name__)


class PostsService:
    """In-memory metadata index over one batch load of a posts directory."""

    def __init__(
        self,
        source: Union[str, Path, None] = None,
        *,
        on_error: Union[ErrorPolicy, str, None] = None,
        parser=None,
    ):
        self.source = source
        self.on_error = on_error
        self.parser = parser
        self._result = LoadResult()
        self._by_slug: Dict[str, Post] = {}
        self.reload()

    def reload(self) -> LoadResult:
        """Discard the current index and rebuild it from the source documents."""
        self._result = load_all(self.source, on_error=self.on_error, parser=self.parser)
        self._by_slug = {post.slug: post for post in self._result.posts}
        return self._result

    @property
    def errors(self):
        return self._result.errors

    def list_posts(self, include_drafts: Optional[bool] = None) -> List[Post]:
        if include_drafts is None:
            include_drafts = settings.BLOG_INCLUDE_DRAFTS
        return [post for post in self._result.posts if include_drafts or not post.draft]

    def get_post(self, slug: str) -> Optional[Post]:
        return self._by_slug.get(slug)

    def posts_with_tag(
        self, tag: str, include_drafts: Optional[bool] = None
    ) -> List[Post]:
        return [post for post in self.list_posts(include_drafts) if tag in post.tags]

    def tag_counts(self, include_drafts: Optional[bool] = None) -> Dict[str, int]:
        counts = Counter(
            tag for post in self.list_posts(include_drafts) for tag in post.tags
        )
        return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))


def parse_post_data(doc: SourceDocument, *, parser) -> Post:
    """Parse frontmatter and return a validated post, or raise ValidationError"""
    markdown = parser.get_markdown_content(doc)
    if not markdown or not frontmatter.checks(markdown):
        raise ValidationError(doc.id, "frontmatter", "missing front-matter block")

    try:
        parsed = frontmatter.loads(markdown)
    except (yaml.YAMLError, TypeError, ValueError) as e:
        raise ValidationError(
            doc.id, "frontmatter", f"invalid front-matter: {e}"
        ) from e
    if not parsed.metadata:
        raise ValidationError(
            doc.id, "frontmatter", "front-matter block is empty or not a mapping"
        )
    if not doc.slug:
        raise ValidationError(doc.id, "document", "file name yields an empty slug")

    data = {
        **parsed.metadata,
        "slug": doc.slug,
        "body": parsed.content,
        "readingTime": calculate_reading_time(
            parsed.content, settings.WORDS_PER_MINUTE
        ),
    }
    try:
        post = Post.model_validate(data)
    except pydantic.ValidationError as e:
        problems = [
            (".".join(str(part) for part in err["loc"]), err["msg"])
            for err in e.errors()
        ]
        field, message = problems[0]
        raise ValidationError(doc.id, field, message, problems) from e

    logger.debug(f"Parsed post {post.slug} from {doc.id}")
    return post


def sort_posts(posts: Iterable[Post]) -> List[Post]:
    """Newest first; posts published on the same day are ordered by slug."""
    return sorted(posts, key=lambda post: (-post.publishDate.toordinal(), post.slug))


def load_all(
    source: Union[str, Path, None] = None,
    *,
    on_error: Union[ErrorPolicy, str, None] = None,
    parser=None,
    max_workers: Optional[int] = None,
    extensions: Optional[Iterable[str]] = None,
) -> LoadResult:
    """Load every post under ``source`` into an ordered, validated collection.

    With ``ErrorPolicy.ABORT`` the first failing document raises. With
    ``ErrorPolicy.SKIP`` failures are collected on the result and the
    offending documents are left out; posts sharing a slug are all left out
    so that neither one silently wins.
    """
    policy = ErrorPolicy(on_error or settings.BLOG_ON_ERROR)
    parser = parser or ContentParser()
    workers = max_workers or settings.BLOG_LOADER_MAX_WORKERS
    repo = FilesystemPostsRepo(
        source if source is not None else settings.posts_path, extensions
    )

    docs = repo.list_post_docs()
    logger.info(f"Loading {len(docs)} post documents from {repo.root}")

    def _parse(doc: SourceDocument):
        try:
            return parse_post_data(doc, parser=parser)
        except ValidationError as e:
            return e

    if workers > 1 and len(docs) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(_parse, docs))
    else:
        # lazy, so abort stops reading at the first failure
        outcomes = map(_parse, docs)

    loaded = []
    errors = []
    for doc, outcome in zip(docs, outcomes):
        if isinstance(outcome, ValidationError):
            if policy is ErrorPolicy.ABORT:
                raise outcome
            logger.warning(f"Skipped {doc.id}: {outcome.field}: {outcome.message}")
            errors.append(outcome)
            continue
        loaded.append((doc, outcome))

    documents_by_slug = defaultdict(list)
    for doc, post in loaded:
        documents_by_slug[post.slug].append(doc.id)

    duplicates = {
        slug: ids for slug, ids in documents_by_slug.items() if len(ids) > 1
    }
    for slug in sorted(duplicates):
        error = DuplicateSlugError(slug, duplicates[slug])
        if policy is ErrorPolicy.ABORT:
            raise error
        logger.warning(f"Skipped {len(duplicates[slug])} documents: {error}")
        errors.append(error)

    posts = sort_posts(post for _, post in loaded if post.slug not in duplicates)
    logger.info(f"Loaded {len(posts)} posts ({len(errors)} errors)")
    return LoadResult(posts=tuple(posts), errors=tuple(errors))
