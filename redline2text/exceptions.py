class ExtractionFileFormatNotSupportedError(Exception):
    """Raised when the file format for extraction is not supported."""

    def __init__(self, file_path: str, message: str = None, *, cause: Exception = None):
        self.file_path = file_path
        if message is None:
            message = f"Extraction file format not supported: {file_path}"
        # Use exception chaining if cause is provided
        super().__init__(message)
        self.__cause__ = cause  # Optional chaining for debugging


class ExtractionError(Exception):
    """Base class for structural failures while extracting tracked changes."""

    def __init__(self, message: str, *, cause: Exception = None):
        super().__init__(message)
        self.__cause__ = cause


class ArchiveFormatError(ExtractionError):
    """Raised when the input cannot be opened as a valid DOCX package."""

    def __init__(self, file_name: str, message: str = None, *, cause: Exception = None):
        self.file_name = file_name
        if message is None:
            message = (
                f'Failed to parse "{file_name}". '
                "The file is not a valid DOCX document or is corrupted."
            )
        super().__init__(message, cause=cause)


class ExtractionZipBombError(ArchiveFormatError):
    """Raised when the package exceeds the archive sanity limits."""

    def __init__(self, file_name: str, reason: str, *, cause: Exception = None):
        self.reason = reason
        super().__init__(
            file_name,
            f'Refusing to read "{file_name}": {reason}',
            cause=cause,
        )


class ExtractionFileEncryptedError(ArchiveFormatError):
    """Raised when the package is password-protected."""

    def __init__(self, file_name: str, *, cause: Exception = None):
        super().__init__(
            file_name,
            f'Failed to parse "{file_name}". '
            "The DOCX is encrypted or password-protected.",
            cause=cause,
        )


class MissingMemberError(ExtractionError):
    """Raised when the package opens but lacks a required part."""

    def __init__(self, file_name: str, member: str):
        self.file_name = file_name
        self.member = member
        super().__init__(f"Invalid DOCX: \"{file_name}\" is missing '{member}'.")


class MarkupParseError(ExtractionError):
    """Raised when a package part is not well-formed XML."""

    def __init__(self, file_name: str, member: str, *, cause: Exception = None):
        self.file_name = file_name
        self.member = member
        detail = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Invalid DOCX: '{member}' in \"{file_name}\" is not well-formed XML{detail}",
            cause=cause,
        )
