import pytest

from docshare.models import DocumentResponse, clean_shared_users, format_file_size


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1.0 MB"),
        (5 * 1024 * 1024 * 1024, "5.0 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected


def test_clean_shared_users_drops_owner_blanks_and_duplicates():
    cleaned = clean_shared_users(["u-2", " u-2 ", "", "owner", "u-3"], "owner")
    assert cleaned == frozenset({"u-2", "u-3"})


def test_document_response_sorts_shared_users(document_factory):
    doc = document_factory.make({"shared_with_users": frozenset({"u-3", "u-2"})})

    response = DocumentResponse.from_document(doc)

    assert response.shared_with_users == ["u-2", "u-3"]
    assert response.formatted_file_size == "2.0 KB"
    assert "blob_key" not in response.model_dump()
