"""Data models for the remote book catalog."""

from pydantic import BaseModel, ConfigDict, Field

from src.remote.constants import PLAIN_TEXT_MIME_TYPES


class RemoteAuthor(BaseModel):
    """Book author as listed by the catalog."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    birth_year: int | None = None
    death_year: int | None = None


class RemoteBook(BaseModel):
    """A catalog entry for a public-domain book.

    Unknown catalog fields are ignored so upstream additions do not break
    parsing.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = ""
    authors: list[RemoteAuthor] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    bookshelves: list[str] = Field(default_factory=list)
    formats: dict[str, str] = Field(default_factory=dict)
    download_count: int = 0

    @property
    def plain_text_url(self) -> str | None:
        """Best plain-text download URL; zip archives are never returned."""
        usable = {
            mime.lower(): url
            for mime, url in self.formats.items()
            if not url.lower().endswith(".zip")
        }
        for mime in PLAIN_TEXT_MIME_TYPES:
            if mime in usable:
                return usable[mime]
        for mime, url in usable.items():
            if mime.startswith("text/plain"):
                return url
        return None

    @property
    def author_names(self) -> str:
        """Authors joined for attribution, e.g. ``"Austen, Jane"``."""
        return "; ".join(author.name for author in self.authors if author.name)

    @property
    def searchable_terms(self) -> list[str]:
        """Lowercased title, subjects and bookshelves."""
        return [
            term.lower() for term in (self.title, *self.subjects, *self.bookshelves)
        ]


class CatalogPage(BaseModel):
    """One page of the catalog list endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    count: int = 0
    next: str | None = None
    results: list[RemoteBook] = Field(default_factory=list)
