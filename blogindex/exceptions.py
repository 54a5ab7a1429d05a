from pathlib import Path
from typing import Optional, Sequence, Tuple, Union


class PostLoaderError(Exception):
    """Base class for everything the post loader raises.

    Errors compare by value so that two loads of the same input produce
    equal results.
    """

    def _key(self) -> tuple:
        return self.args

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash((type(self), self._key()))


class NotFoundError(PostLoaderError):
    def __init__(self, location: Union[str, Path], reason: str = "does not exist"):
        self.location = str(location)
        self.reason = reason
        super().__init__(f"Source location {self.location} {reason}")

    def _key(self) -> tuple:
        return (self.location, self.reason)


class ValidationError(PostLoaderError):
    """A single document failed front-matter validation.

    ``field`` is the dotted front-matter key of the first problem found;
    ``problems`` keeps every ``(field, message)`` pair so callers can report
    them all at once.
    """

    def __init__(
        self,
        document: str,
        field: Optional[str],
        message: str,
        problems: Sequence[Tuple[str, str]] = (),
    ):
        self.document = document
        self.field = field
        self.message = message
        self.problems = tuple(problems) or ((field or "", message),)
        super().__init__(f"{document}: {field}: {message}")

    def _key(self) -> tuple:
        return (self.document, self.field, self.message, self.problems)


class DuplicateSlugError(PostLoaderError):
    def __init__(self, slug: str, documents: Sequence[str]):
        self.slug = slug
        self.documents = tuple(documents)
        super().__init__(
            f"Duplicate slug {slug!r} for documents: {', '.join(self.documents)}"
        )

    def _key(self) -> tuple:
        return (self.slug, self.documents)
