import os

import pytest

from mp3_download_service.app.utils.file_utils import (
    DEFAULT_FILENAME,
    FileDelivery,
    filename_from_content_disposition,
    guess_media_type,
    sanitize_filename,
    title_from_filename,
)


@pytest.mark.parametrize(
    "header, expected",
    [
        ('attachment; filename="Song Title.mp3"', "Song Title.mp3"),
        ("attachment; filename=Song.mp3", "Song.mp3"),
        ('attachment; filename="a;b.mp3"', "a;b.mp3"),
        (
            "attachment; filename=\"fallback.mp3\"; filename*=UTF-8''Canci%C3%B3n.mp3",
            "Canción.mp3",
        ),
        ("attachment", DEFAULT_FILENAME),
        ("attachment; filename=", DEFAULT_FILENAME),
        (None, DEFAULT_FILENAME),
        ("", DEFAULT_FILENAME),
    ],
)
def test_filename_from_content_disposition(header, expected):
    assert filename_from_content_disposition(header) == expected


@pytest.mark.parametrize(
    "filename, title",
    [
        ("Song Title.mp3", "Song Title"),
        ("audio.mp3", "audio"),
        ("Mr. Blue Sky.mp3", "Mr. Blue Sky"),
        ("no extension", "no extension"),
        ("archive.tar.gz", "archive.tar"),
    ],
)
def test_title_strips_only_the_final_extension(filename, title):
    assert title_from_filename(filename) == title


def test_sanitize_filename():
    assert sanitize_filename("My Song / Live?.mp3") == "My_Song__Live.mp3"
    assert sanitize_filename("???") == "audio"


def test_guess_media_type():
    assert guess_media_type("Song.mp3") == "audio/mpeg"
    assert guess_media_type("Song.unknownext") == "application/octet-stream"


def test_materialize_writes_payload_with_extension(tmp_path):
    delivery = FileDelivery(directory=str(tmp_path), release_delay=0)

    delivered = delivery.materialize(b"ID3 audio", "Song Title.mp3")

    assert delivered.path.endswith(".mp3")
    assert os.path.dirname(delivered.path) == str(tmp_path)
    assert delivered.filename == "Song Title.mp3"
    assert delivered.media_type == "audio/mpeg"
    with open(delivered.path, "rb") as f:
        assert f.read() == b"ID3 audio"


@pytest.mark.asyncio
async def test_release_removes_file_and_tolerates_missing_one(tmp_path):
    delivery = FileDelivery(directory=str(tmp_path), release_delay=0)
    delivered = delivery.materialize(b"data", "x.mp3")

    await delivery.release(delivered.path)
    assert not os.path.exists(delivered.path)

    # A second release is a no-op
    await delivery.release(delivered.path)


def test_discard_removes_undelivered_file(tmp_path):
    delivery = FileDelivery(directory=str(tmp_path), release_delay=0)
    delivered = delivery.materialize(b"data", "x.mp3")

    delivery.discard(delivered.path)
    delivery.discard(delivered.path)

    assert list(tmp_path.iterdir()) == []
