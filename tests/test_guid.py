import uuid

import pytest

from bootcore.guid import (
    Guid,
    guid_from_string_be,
    guid_from_string_mixed,
    is_valid_guid,
)

SAMPLE = "00112233-4455-6677-8899-aabbccddeeff"
SAMPLE_UPPER = "C12A7328-F81F-11D2-BA4B-00A0C93EC93B"


def test_valid_guids():
    assert is_valid_guid(SAMPLE) is True
    assert is_valid_guid(SAMPLE_UPPER) is True


@pytest.mark.parametrize(
    "text",
    [
        "",
        SAMPLE[:-1],
        SAMPLE + "0",
        SAMPLE.replace("-", "_"),
        "0011223-34455-6677-8899-aabbccddeeff",
        "g0112233-4455-6677-8899-aabbccddeeff",
    ],
)
def test_invalid_guids(text):
    assert is_valid_guid(text) is False


@pytest.mark.parametrize("text", [SAMPLE, SAMPLE_UPPER])
def test_be_matches_string_order(text):
    assert guid_from_string_be(text).to_bytes() == uuid.UUID(text).bytes


@pytest.mark.parametrize("text", [SAMPLE, SAMPLE_UPPER])
def test_mixed_matches_standard_layout(text):
    assert guid_from_string_mixed(text).to_bytes() == uuid.UUID(text).bytes_le


def test_mixed_fields_read_as_numbers():
    guid = guid_from_string_mixed(SAMPLE_UPPER)
    assert guid.a == int(SAMPLE_UPPER[0:8], 16)
    assert guid.b == int(SAMPLE_UPPER[9:13], 16)
    assert guid.c == int(SAMPLE_UPPER[14:18], 16)
    assert guid.d == bytes.fromhex(SAMPLE_UPPER[19:23] + SAMPLE_UPPER[24:])


def test_be_and_mixed_differ_only_in_first_three_fields():
    be = guid_from_string_be(SAMPLE).to_bytes()
    mixed = guid_from_string_mixed(SAMPLE).to_bytes()
    assert be[8:] == mixed[8:]
    assert be[:4] == mixed[:4][::-1]
    assert be[4:6] == mixed[4:6][::-1]
    assert be[6:8] == mixed[6:8][::-1]


def test_bytes_round_trip():
    guid = guid_from_string_mixed(SAMPLE)
    assert Guid.from_bytes(guid.to_bytes()) == guid


def test_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        Guid.from_bytes(b"\x00" * 15)


@pytest.mark.parametrize("parser", [guid_from_string_be, guid_from_string_mixed])
def test_parsers_reject_invalid(parser):
    with pytest.raises(ValueError):
        parser("not-a-guid")