"""Unit tests for audio upload validation and word counting."""

import pytest

from voxprompt.core.errors import (
    MissingInput,
    PayloadTooLarge,
    PayloadTooSmall,
    UnsupportedFormat,
)
from voxprompt.core.transcriptions.service import count_words, parse_id
from voxprompt.core.transcriptions.transcriber import (
    ALLOWED_EXTENSIONS,
    MAX_AUDIO_BYTES,
    MIN_AUDIO_BYTES,
    validate_audio_upload,
)


@pytest.mark.unit
class TestValidateAudioUpload:

    @pytest.mark.parametrize("extension", sorted(ALLOWED_EXTENSIONS))
    def test_allowed_extensions(self, extension):
        validate_audio_upload(f"clip.{extension}", 4096)

    def test_extension_is_case_insensitive(self):
        validate_audio_upload("CLIP.MP3", 4096)

    @pytest.mark.parametrize("file_name", ["notes.txt", "clip.flac", "clip", "mp3"])
    def test_unsupported_extension(self, file_name):
        with pytest.raises(UnsupportedFormat):
            validate_audio_upload(file_name, 4096)

    def test_missing_file(self):
        with pytest.raises(MissingInput):
            validate_audio_upload(None, None)
        with pytest.raises(MissingInput):
            validate_audio_upload("", 4096)

    def test_size_bounds_are_inclusive(self):
        validate_audio_upload("a.wav", MIN_AUDIO_BYTES)
        validate_audio_upload("a.wav", MAX_AUDIO_BYTES)

    def test_too_large(self):
        with pytest.raises(PayloadTooLarge):
            validate_audio_upload("a.wav", MAX_AUDIO_BYTES + 1)

    def test_too_small(self):
        with pytest.raises(PayloadTooSmall):
            validate_audio_upload("a.wav", MIN_AUDIO_BYTES - 1)

    def test_extension_checked_before_size(self):
        with pytest.raises(UnsupportedFormat):
            validate_audio_upload("a.txt", 1)


@pytest.mark.unit
class TestCountWords:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("hello world", 2),
            ("  hello   world \n again\t", 3),
            ("", 0),
            ("   ", 0),
            (None, 0),
            ("one", 1),
        ],
    )
    def test_whitespace_tokens(self, text, expected):
        assert count_words(text) == expected


@pytest.mark.unit
class TestParseId:

    def test_valid_uuid(self):
        raw = "3f8c1d2a-9b04-4c1e-8f00-000000000001"
        assert str(parse_id(raw)) == raw

    @pytest.mark.parametrize("raw", ["", "not-a-uuid", "123"])
    def test_malformed(self, raw):
        assert parse_id(raw) is None
