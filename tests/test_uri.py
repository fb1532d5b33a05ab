import gzip
import hashlib

import pytest

from bootcore.guid import guid_from_string_be, guid_from_string_mixed
from bootcore.part import Volume, VolumeIndex
from bootcore.uri import (
    Uri,
    UriError,
    decompress_payload,
    locate_volume,
    parse_drive_partition,
    resolve_uri,
    verify_hash,
)

GUID_TEXT = "12345678-9abc-def0-1234-56789abcdef0"
HASH = "a" * 128


def test_resolve_simple():
    uri = resolve_uri("boot():/kernel.elf".replace("():", "://"))
    assert uri == Uri("boot", "", "kernel.elf")


def test_resolve_full():
    uri = resolve_uri(f"$hdd://1:2/boot/vmlinuz#{HASH}")
    assert uri.resource == "hdd"
    assert uri.compressed is True
    assert uri.root == "1:2"
    assert uri.path == "boot/vmlinuz"
    assert uri.hash == HASH


@pytest.mark.parametrize("text", ["no-separator", "hdd://noslash", "hdd://1:1/", "x:/"])
def test_resolve_rejects_incomplete(text):
    with pytest.raises(UriError):
        resolve_uri(text)


def test_resolve_rejects_short_hash():
    with pytest.raises(UriError):
        resolve_uri("boot:///kernel#abcd")


def test_parse_drive_partition():
    assert parse_drive_partition("1:2") == (1, 2)
    assert parse_drive_partition("3:") == (3, 0)


@pytest.mark.parametrize("text", ["12", ":1", "0:1", "257:1", "1:257"])
def test_parse_drive_partition_errors(text):
    with pytest.raises(UriError):
        parse_drive_partition(text)


@pytest.fixture
def index():
    idx = VolumeIndex()
    idx.add(Volume(index=1, partition=0))
    idx.add(Volume(index=1, partition=2, fslabel="ROOT"))
    idx.add(Volume(index=1, is_optical=True, partition=1))
    idx.add(Volume(index=2, partition=1, guid=guid_from_string_mixed(GUID_TEXT)))
    return idx


def test_locate_hdd_and_odd(index):
    hdd = locate_volume(resolve_uri("hdd://1:2/a"), index)
    odd = locate_volume(resolve_uri("odd://1:1/a"), index)
    assert (hdd.index, hdd.partition, hdd.is_optical) == (1, 2, False)
    assert (odd.index, odd.partition, odd.is_optical) == (1, 1, True)
    assert locate_volume(resolve_uri("hdd://1:5/a"), index) is None


def test_locate_fslabel(index):
    assert locate_volume(resolve_uri("fslabel://ROOT/a"), index).partition == 2
    assert locate_volume(resolve_uri("fslabel://NONE/a"), index) is None


def test_locate_guid_falls_back_to_mixed(index):
    found = locate_volume(resolve_uri(f"guid://{GUID_TEXT}/a"), index)
    assert found.index == 2
    assert locate_volume(resolve_uri(f"uuid://{GUID_TEXT}/a"), index) is found
    assert locate_volume(resolve_uri("guid://not-a-guid/a"), index) is None


def test_locate_guid_big_endian(index):
    vol = index.add(Volume(index=3, partition=1, part_guid=guid_from_string_be(GUID_TEXT)))
    index.volumes.remove(index.volumes[3])
    assert locate_volume(resolve_uri(f"guid://{GUID_TEXT}/a"), index) is vol


def test_locate_boot(index):
    boot = index.by_coord(False, 1, 2)
    assert locate_volume(resolve_uri("boot:///a"), index, boot) is boot
    assert locate_volume(resolve_uri("boot://0/a"), index, boot).partition == 0
    with pytest.raises(UriError):
        locate_volume(resolve_uri("boot://300/a"), index, boot)
    with pytest.raises(UriError):
        locate_volume(resolve_uri("boot:///a"), index, None)


@pytest.mark.parametrize("text", ["bios://1:1/a", "tftp:///a", "weird://x/a"])
def test_locate_rejects_resources(index, text):
    with pytest.raises(UriError):
        locate_volume(resolve_uri(text), index)


def test_verify_hash():
    data = b"kernel image"
    digest = hashlib.blake2b(data).hexdigest()
    assert verify_hash(data, digest) is True
    assert verify_hash(data + b"!", digest) is False
    assert verify_hash(data, digest.upper()) is True


def test_verify_hash_errors():
    with pytest.raises(UriError):
        verify_hash(b"", "ab")
    with pytest.raises(UriError):
        verify_hash(b"", "zz" * 64)


def test_decompress_round_trip():
    payload = b"initrd contents " * 100
    assert decompress_payload(gzip.compress(payload)) == payload


def test_decompress_corrupt():
    with pytest.raises(UriError):
        decompress_payload(b"not gzip at all")