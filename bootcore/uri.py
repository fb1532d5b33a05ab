"""Boot resource URIs of the form ``resource://root/path#hash``."""

from __future__ import annotations

import gzip
import hashlib
import zlib
from dataclasses import dataclass
from typing import Optional

from .guid import guid_from_string_be, guid_from_string_mixed, is_valid_guid
from .part import Volume, VolumeIndex
from .textutil import strtoui

HASH_HEX_LENGTH = 128
BLAKE2B_OUT_BYTES = 64
MAX_DRIVE = 256
MAX_PARTITION = 256


class UriError(ValueError):
    """A URI is malformed or names a resource that cannot be used."""


@dataclass(frozen=True)
class Uri:
    """A split-up resource URI."""

    resource: str
    root: str
    path: str
    hash: Optional[str] = None
    compressed: bool = False


def resolve_uri(text: str) -> Uri:
    """Split ``text`` into its resource, root, path and optional hash.

    A resource starting with ``$`` marks a gzip-compressed file. Raises
    UriError when a part is missing or a hash is not 128 characters long.
    """
    sep = text.find("://")
    if sep < 0:
        raise UriError(f"no resource in URI {text!r}")
    resource = text[:sep]
    rest = text[sep + 3:]

    slash = rest.find("/")
    if slash < 0:
        raise UriError(f"no root in URI {text!r}")
    root = rest[:slash]
    path = rest[slash + 1:]
    if not path:
        raise UriError(f"no path in URI {text!r}")

    digest: Optional[str] = None
    cut = path.rfind("#")
    if cut >= 0:
        path, digest = path[:cut], path[cut + 1:]
        if len(digest) != HASH_HEX_LENGTH:
            raise UriError("Blake2b hash must be 128 characters long")

    compressed = resource.startswith("$")
    if compressed:
        resource = resource[1:]
    return Uri(resource, root, path, digest, compressed)


def parse_drive_partition(text: str) -> tuple[int, int]:
    """Parse a ``drive:partition`` root as used by hdd:// and odd://."""
    drive_text, colon, part_text = text.partition(":")
    if not colon:
        raise UriError(f"missing ':' in drive specification {text!r}")
    if not drive_text:
        raise UriError("Drive number cannot be omitted for hdd:// and odd://")
    drive, _ = strtoui(drive_text, 10)
    if drive < 1 or drive > MAX_DRIVE:
        raise UriError("Drive number outside range 1-256")
    partition, _ = strtoui(part_text, 10)
    if partition > MAX_PARTITION:
        raise UriError("Partition number outside range 0-256")
    return drive, partition


def _by_guid(index: VolumeIndex, text: str) -> Optional[Volume]:
    if not is_valid_guid(text):
        return None
    volume = index.by_guid(guid_from_string_be(text))
    if volume is None:
        volume = index.by_guid(guid_from_string_mixed(text))
    return volume


def _by_boot(root: str, index: VolumeIndex, boot_volume: Optional[Volume]) -> Optional[Volume]:
    if boot_volume is None:
        raise UriError("boot:// needs a boot volume")
    if boot_volume.pxe:
        raise UriError("boot:// on a network boot volume names no local volume")
    if root:
        partition, _ = strtoui(root, 10)
        if partition > MAX_PARTITION:
            raise UriError("Partition number outside range 0-256")
    else:
        partition = boot_volume.partition
    return index.by_coord(boot_volume.is_optical, boot_volume.index, partition)


def locate_volume(uri: Uri, index: VolumeIndex,
                  boot_volume: Optional[Volume] = None) -> Optional[Volume]:
    """Find the volume that ``uri`` refers to, or None if there is none.

    Raises UriError for resources that are not valid or name no volume.
    """
    resource = uri.resource
    if resource == "bios":
        raise UriError("bios:// resource is no longer supported; use hdd:// and odd://")
    if resource in ("hdd", "odd"):
        drive, partition = parse_drive_partition(uri.root)
        return index.by_coord(resource == "odd", drive, partition)
    if resource == "boot":
        return _by_boot(uri.root, index, boot_volume)
    if resource in ("guid", "uuid"):
        return _by_guid(index, uri.root)
    if resource == "fslabel":
        return index.by_fslabel(uri.root)
    if resource == "tftp":
        raise UriError("tftp:// names a network server, not a volume")
    raise UriError(f"Resource `{resource}` not valid.")


def verify_hash(data: bytes, hex_hash: str) -> bool:
    """True if the BLAKE2b-512 digest of ``data`` matches ``hex_hash``."""
    if len(hex_hash) != HASH_HEX_LENGTH:
        raise UriError("Blake2b hash must be 128 characters long")
    try:
        expected = bytes.fromhex(hex_hash)
    except ValueError:
        raise UriError(f"invalid hash {hex_hash!r}") from None
    return hashlib.blake2b(data, digest_size=BLAKE2B_OUT_BYTES).digest() == expected


def decompress_payload(data: bytes) -> bytes:
    """Uncompress a gzip-compressed file; raises UriError if it is corrupt."""
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise UriError(f"decompression failed: {exc}") from None