import json

import pytest

import redline2text
from redline2text.cli import main
from redline2text.extractors.serialization import serialize_extraction

BODY = (
    '<w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr><w:r><w:t>Terms</w:t></w:r></w:p>'
    '<w:p><w:r><w:t xml:space="preserve">Pay </w:t></w:r>'
    '<w:ins w:id="1" w:author="Alice"><w:r><w:t>promptly</w:t></w:r></w:ins>'
    '<w:r><w:commentReference w:id="0"/></w:r></w:p>'
)


@pytest.fixture
def docx_path(tmp_path, make_docx):
    path = tmp_path / "terms.docx"
    path.write_bytes(make_docx(BODY, comments={"0": "Define promptly"}).getvalue())
    return path


def test_cli_outputs_full_text_by_default(capsys, docx_path) -> None:
    expected = next(redline2text.read_file(docx_path)).get_full_text()

    exit_code = main([str(docx_path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out == f"{expected.rstrip()}\n"
    assert captured.out == "Terms\nPay promptly\n"


def test_cli_outputs_json_with_flag(capsys, docx_path) -> None:
    expected = serialize_extraction(next(redline2text.read_file(docx_path)))

    exit_code = main(["--json", str(docx_path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    payload = json.loads(captured.out.strip())
    assert payload == expected
    assert payload["_type"] == "TrackedChangesContent"
    assert [item["id"] for item in payload["items"]] == ["ins-1-0", "com-0"]


def test_cli_outputs_change_lines(capsys, docx_path) -> None:
    exit_code = main(["--changes", str(docx_path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out.splitlines() == [
        "[2] INSERTION ins-1-0 (Alice): promptly",
        "[2] COMMENT com-0: Define promptly",
    ]


def test_cli_reports_when_no_changes(capsys, tmp_path, make_docx) -> None:
    path = tmp_path / "clean.docx"
    path.write_bytes(make_docx("<w:p><w:r><w:t>Clean</w:t></w:r></w:p>").getvalue())

    exit_code = main(["--changes", str(path)])
    captured = capsys.readouterr()

    assert exit_code == 0
    assert captured.out == ""
    assert "no tracked changes" in captured.err


def test_cli_reports_invalid_package(capsys, tmp_path) -> None:
    path = tmp_path / "fake.docx"
    path.write_bytes(b"this is not a zip file")

    exit_code = main([str(path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "fake.docx" in captured.err
    assert "not a valid DOCX" in captured.err


def test_cli_reports_unsupported_file(capsys, tmp_path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello")

    exit_code = main([str(path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "not supported" in captured.err


def test_cli_warns_on_unsupported_argument(capsys, docx_path) -> None:
    exit_code = main(["--json", "--not-a-real-flag", str(docx_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "warning: unsupported arguments" in captured.err


def test_cli_rejects_conflicting_output_flags(capsys, docx_path) -> None:
    exit_code = main(["--json", "--changes", str(docx_path)])

    assert exit_code == 2
