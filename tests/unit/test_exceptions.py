from comicpdf.exceptions import (
    AllConversionsFailedError,
    AsyncExecutionError,
    EditorDataError,
    EmptyDocumentError,
    ExtractionFailedError,
    ImageDecodeError,
    NoImagesFoundError,
    PackageError,
    SettingsError,
    UnknownFormatError,
)


def test_root_exception_hierarchy() -> None:
    for error_type in (
        SettingsError,
        AsyncExecutionError,
        UnknownFormatError,
        ExtractionFailedError,
        NoImagesFoundError,
        ImageDecodeError,
        EmptyDocumentError,
        AllConversionsFailedError,
        EditorDataError,
    ):
        assert issubclass(error_type, PackageError)


def test_error_messages_name_the_archive() -> None:
    assert str(ExtractionFailedError(filename="a.cbr", message="bad header")) == (
        "Failed to extract archive a.cbr: bad header"
    )
    assert str(NoImagesFoundError(filename="a.cbz")) == "No images found in archive file a.cbz"
    assert "No files could be converted" in str(AllConversionsFailedError(attempted=3))
