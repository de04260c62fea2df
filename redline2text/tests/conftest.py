import io
import zipfile

import pytest

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "</Types>"
)


def _document_xml(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'
    )


def _comments_xml(comments: dict[str, str]) -> str:
    entries = "".join(
        f'<w:comment w:id="{comment_id}" w:author="Reviewer">'
        f"<w:p><w:r><w:t>{text}</w:t></w:r></w:p></w:comment>"
        for comment_id, text in comments.items()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:comments xmlns:w="{W_NS}">{entries}</w:comments>'
    )


def _zip_bytesio(files: dict[str, str | bytes]) -> io.BytesIO:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    buffer.seek(0)
    return buffer


@pytest.fixture
def document_xml():
    """Wrap paragraph markup into a complete word/document.xml payload."""
    return _document_xml


@pytest.fixture
def comments_xml():
    """Build a word/comments.xml payload from an id -> text mapping."""
    return _comments_xml


@pytest.fixture
def make_zip():
    return _zip_bytesio


@pytest.fixture
def make_docx():
    """
    Build an in-memory DOCX package.

    ``body`` is the inner markup of w:body. ``comments`` is rendered into
    word/comments.xml; ``raw_comments`` replaces that payload verbatim.
    """

    def _make(
        body: str = "",
        comments: dict[str, str] | None = None,
        *,
        raw_comments: str | bytes | None = None,
        raw_body: str | bytes | None = None,
        include_body: bool = True,
    ) -> io.BytesIO:
        files: dict[str, str | bytes] = {"[Content_Types].xml": CONTENT_TYPES}
        if include_body:
            files["word/document.xml"] = (
                raw_body if raw_body is not None else _document_xml(body)
            )
        if raw_comments is not None:
            files["word/comments.xml"] = raw_comments
        elif comments is not None:
            files["word/comments.xml"] = _comments_xml(comments)
        return _zip_bytesio(files)

    return _make
