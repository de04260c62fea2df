import logging
import unittest

from redline2text.exceptions import ExtractionFileFormatNotSupportedError
from redline2text.extractors.ms_modern.docx_changes_extractor import read_docx_changes
from redline2text.router import get_extractor, is_supported_file

logger = logging.getLogger(__name__)

tc = unittest.TestCase()


def test_is_supported():
    tc.assertTrue(is_supported_file("myfile.docx"))
    tc.assertTrue(is_supported_file("MyFile.DOCX"))
    tc.assertTrue(is_supported_file("myfile.docm"))
    tc.assertTrue(is_supported_file("myfile.dotx"))
    tc.assertTrue(is_supported_file("myfile.dotm"))

    tc.assertFalse(is_supported_file("myfile.doc"))
    tc.assertFalse(is_supported_file("myfile.csv"))
    tc.assertFalse(is_supported_file("myfile.xlsx"))
    tc.assertFalse(is_supported_file("i-have-no-file-type"))


def test_router():
    # docx
    func = get_extractor("myfile.docx")
    tc.assertEqual(read_docx_changes, func)

    # macro-enabled and templates share the package layout
    func = get_extractor("folder/myfile.docm")
    tc.assertEqual(read_docx_changes, func)

    func = get_extractor("myfile.dotx")
    tc.assertEqual(read_docx_changes, func)

    tc.assertRaises(
        ExtractionFileFormatNotSupportedError,
        get_extractor,
        "not_supported.xls",
    )

    tc.assertRaises(
        ExtractionFileFormatNotSupportedError,
        get_extractor,
        "i-have-no-file-type",
    )
