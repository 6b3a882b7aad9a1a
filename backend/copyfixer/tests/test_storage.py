import pytest

from copyfixer.errors import ValidationError
from copyfixer.storage import ReferenceFileStorage


def test_build_key_flattens_path_separators():
    assert (
        ReferenceFileStorage.build_key(file_id="abc", filename="../brand/voice.pdf")
        == "reference-docs/abc-.._brand_voice.pdf"
    )


def test_public_url_round_trips_to_key(storage):
    key = "reference-docs/abc-tone board.png"

    url = storage.public_url(key)

    assert url == "https://storage.test/reference-files/reference-docs/abc-tone%20board.png"
    assert storage.key_from_url(url) == key


def test_key_from_url_accepts_bucket_path_urls(storage):
    url = "https://project.supabase.co/storage/v1/object/public/reference-files/reference-docs/abc-guide.pdf"

    assert storage.key_from_url(url) == "reference-docs/abc-guide.pdf"


@pytest.mark.parametrize(
    "url",
    [
        "https://elsewhere.test/guide.pdf",
        "https://storage.test/reference-files/avatars/me.png",
        "https://storage.test/reference-files/reference-docs/../secrets.txt",
    ],
)
def test_key_from_url_rejects_unexpected_urls(storage, url):
    with pytest.raises(ValidationError, match="Invalid file URL format"):
        storage.key_from_url(url)


def test_delete_urls_skips_bad_urls(storage):
    storage.objects["reference-docs/a-one.pdf"] = (b"1", "application/pdf")

    storage.delete_urls(
        [
            "https://elsewhere.test/nope.pdf",
            "https://storage.test/reference-files/reference-docs/a-one.pdf",
        ]
    )

    assert storage.objects == {}
    assert storage.deleted == ["reference-docs/a-one.pdf"]
