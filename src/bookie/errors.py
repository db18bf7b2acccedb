"""Exception hierarchy for book compilation."""


class BookError(Exception):
    """Base class for every error raised while compiling a book."""


class InvalidConfigError(BookError):
    """Missing input directory, unusable output path or bad setting."""


class NoChaptersError(BookError):
    """Root contains no Episode directory with at least one markdown file."""

    def __init__(self, message: str = "no episode chapters found"):
        super().__init__(message)


class EmptyChapterError(BookError):
    """A chapter reached processing without any markdown files."""

    def __init__(self, message: str = "empty chapter with no content files"):
        super().__init__(message)


class NoBodyError(BookError):
    """Parsed HTML document has no body element."""

    def __init__(self, message: str = "HTML document missing body element"):
        super().__init__(message)


class ParseError(BookError):
    """Markdown or HTML could not be parsed."""


class BookIOError(BookError):
    """File read, write or stat failure."""


class UnsupportedImageFormatError(BookError):
    """Only JPEG images can be placed in the document body."""


class ImageNotFoundError(BookError):
    """No lookup root produced an existing file for an image src."""


class InvalidTableError(BookError):
    """Malformed table structure."""

    def __init__(self, message: str = "invalid table structure"):
        super().__init__(message)


class EmptyTableError(BookError):
    """Table without any content to lay out."""

    def __init__(self, message: str = "table has no content"):
        super().__init__(message)


class CompilationCancelledError(BookError):
    """The caller cancelled the compile between two files."""

    def __init__(self, message: str = "compilation cancelled"):
        super().__init__(message)


class RenderError(BookError):
    """Wraps a failure with the chapter/file context it happened in."""

    def __init__(self, context: str, cause: BaseException):
        super().__init__(f"{context}: {cause}")
        self.context = context
        self.cause = cause

    @property
    def root_cause(self) -> BaseException:
        """Innermost wrapped exception."""
        cause: BaseException = self
        while isinstance(cause, RenderError):
            cause = cause.cause
        return cause
