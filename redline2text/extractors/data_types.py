import typing
from abc import abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol


@dataclass
class FileMetadataInterface:
    filename: str | None = None
    file_extension: str | None = None
    file_path: str | None = None
    folder_path: str | None = None

    def populate_from_path(self, path: str | Path | None) -> None:
        """
        Populate file metadata fields from a path as given.

        The path is taken literally; it is never resolved or checked against
        the filesystem.
        """
        if path is None:
            return
        p = Path(path)
        self.filename = p.name
        self.file_extension = p.suffix
        self.file_path = str(p)
        self.folder_path = str(p.parent)

    def to_dict(self) -> dict:
        return asdict(self)


class ExtractionInterface(Protocol):
    @abstractmethod
    def iterator(self) -> typing.Iterator[str]:
        """
        Returns an iterator over the extracted text i.e., the main text body of a file.
        Word documents have no per-page representation in the package, they return
        only a single unit which is the full text.
        """
        ...

    @abstractmethod
    def get_full_text(self) -> str:
        """Full text of the document as one single block of text"""
        ...

    @abstractmethod
    def get_metadata(self) -> FileMetadataInterface:
        """Returns the metadata of the extracted file"""
        ...


#################
# tracked changes
#################


class ChangeType(str, Enum):
    INSERTION = "INSERTION"
    DELETION = "DELETION"
    COMMENT = "COMMENT"


@dataclass(frozen=True)
class CommentRecord:
    id: str = ""
    text: str = ""


@dataclass(frozen=True)
class TrackedItem:
    """One editorial change found in the document body."""

    id: str
    kind: ChangeType
    # inserted/deleted text, or a placeholder for comments
    text: str
    # plain text of the paragraph the change sits in
    context: str
    # nearest preceding heading
    section_context: str
    # 1-based position of the source paragraph
    paragraph_index: int
    author: Optional[str] = None
    date: Optional[str] = None
    comment_content: Optional[str] = None


@dataclass
class TrackedChangesMetadata(FileMetadataInterface):
    paragraph_count: int = 0
    comment_count: int = 0


@dataclass(frozen=True)
class TrackedChangesContent(ExtractionInterface):
    full_text: str = ""
    items: tuple[TrackedItem, ...] = ()
    metadata: TrackedChangesMetadata = field(default_factory=TrackedChangesMetadata)

    def iterator(self) -> typing.Iterator[str]:
        yield self.full_text

    def get_full_text(self) -> str:
        return "\n".join(self.iterator())

    def get_metadata(self) -> TrackedChangesMetadata:
        return self.metadata

    def iterate_items(
        self, kind: ChangeType | None = None
    ) -> typing.Iterator[TrackedItem]:
        """Items in document order, optionally restricted to one kind."""
        for item in self.items:
            if kind is None or item.kind == kind:
                yield item

    def get_item(self, item_id: str) -> TrackedItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_json(self) -> dict:
        from redline2text.extractors.serialization import serialize_extraction

        return serialize_extraction(self)
