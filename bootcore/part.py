"""Block volumes, GPT and MBR partition tables, and a volume index."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from itertools import count as _count
from typing import Callable, Iterator, Optional

from .guid import Guid

NO_PARTITION = -1
INVALID_TABLE = -2
END_OF_TABLE = -3

_GPT_HEADER = struct.Struct("<8sIIIIQQQQ16sQIII")
_GPT_ENTRY = struct.Struct("<16s16sQQQ72s")
_MBR_ENTRY = struct.Struct("<B3sB3sII")

_GPT_SIGNATURE = b"EFI PART"
_GPT_REVISION = 0x00010000
_LOGICAL_BLOCK_GUESSES = (512, 4096)
_EXTENDED_TYPES = (0x0F, 0x05)
_EMPTY_GUID = bytes(16)

FsProbe = Callable[["Volume"], "tuple[Optional[Guid], Optional[str]]"]


class PartitionTableError(Exception):
    """Base class for partition table lookup failures."""


class InvalidTableError(PartitionTableError):
    """The volume carries no partition table that can be understood."""


class EndOfTableError(PartitionTableError):
    """The requested partition lies past the end of the table."""


class BlockDevice:
    """A sector-addressed disk backed by an in-memory image."""

    def __init__(self, data: bytes, sector_size: int = 512, media_present: bool = True):
        if sector_size <= 0:
            raise ValueError("sector size must be positive")
        self.data = bytes(data)
        self.sector_size = sector_size
        self.media_present = media_present

    def read_sectors(self, lba: int, count: int) -> bytes:
        """Read ``count`` sectors starting at ``lba``.

        Raises OSError when no media is present and EOFError when the
        request runs past the end of the disk.
        """
        if not self.media_present:
            raise OSError("no media in drive")
        if lba < 0 or count <= 0:
            raise ValueError("invalid sector range")
        start = lba * self.sector_size
        end = start + count * self.sector_size
        if end > len(self.data):
            raise EOFError(f"read of sectors {lba}..{lba + count - 1} past end of disk")
        return self.data[start:end]


@dataclass(eq=False)
class Volume:
    """A whole disk or a partition on one, read through a one-block cache."""

    device: Optional[BlockDevice] = None
    index: int = 0
    is_optical: bool = False
    pxe: bool = False
    partition: int = 0
    sector_size: int = 512
    fastest_xfer_size: int = 1
    max_partition: int = -1
    first_sect: int = 0
    sect_count: int = 0
    backing_dev: Optional["Volume"] = field(default=None, repr=False)
    guid: Optional[Guid] = None
    part_guid: Optional[Guid] = None
    fslabel: Optional[str] = None
    _cache: Optional[bytes] = field(default=None, init=False, repr=False)
    _cached_block: Optional[int] = field(default=None, init=False, repr=False)

    @property
    def _block_size(self) -> int:
        return self.fastest_xfer_size * self.sector_size

    def _cache_block(self, block: int) -> bytes:
        if self._cache is not None and self._cached_block == block:
            return self._cache
        self._cached_block = None
        if self.device is None:
            raise OSError("volume has no backing device")
        ratio = self.sector_size // 512
        if ratio == 0 or self.first_sect % ratio:
            raise OSError("partition start is not aligned to the sector size")
        first = self.first_sect // ratio
        xfer = self.fastest_xfer_size
        while True:
            try:
                data = self.device.read_sectors(first + block * self.fastest_xfer_size, xfer)
                break
            except EOFError:
                xfer -= 1
                if xfer == 0:
                    raise OSError(f"cannot read block {block}") from None
        size = self._block_size
        self._cache = data.ljust(size, b"\0")[:size]
        self._cached_block = block
        return self._cache

    def read(self, loc: int, count: int) -> bytes:
        """Read ``count`` bytes at byte offset ``loc``; raises OSError on failure."""
        if self.pxe:
            raise ValueError("cannot read sectors from a network boot volume")
        block_size = self._block_size
        out = bytearray()
        progress = 0
        while progress < count:
            block, offset = divmod(loc + progress, block_size)
            cache = self._cache_block(block)
            chunk = min(count - progress, block_size - offset)
            out += cache[offset:offset + chunk]
            progress += chunk
        return bytes(out)


def _read_lenient(volume: Volume, loc: int, count: int) -> bytes:
    try:
        return volume.read(loc, count)
    except OSError:
        return bytes(count)


def _read_gpt_header(volume: Volume) -> Optional[tuple[int, tuple]]:
    for lb_size in _LOGICAL_BLOCK_GUESSES:
        header = _GPT_HEADER.unpack(_read_lenient(volume, lb_size, _GPT_HEADER.size))
        if header[0] == _GPT_SIGNATURE:
            return lb_size, header
    return None


def gpt_get_guid(volume: Volume) -> Optional[Guid]:
    """The disk GUID from a GPT header, or None if there is no valid GPT."""
    found = _read_gpt_header(volume)
    if found is None:
        return None
    _, header = found
    if header[1] != _GPT_REVISION:
        return None
    return Guid.from_bytes(header[9])


def _derive(parent: Volume, number: int, first_sect: int, sect_count: int,
            backing: Optional[Volume]) -> Volume:
    return Volume(
        device=parent.device,
        index=parent.index,
        is_optical=parent.is_optical,
        partition=number,
        sector_size=parent.sector_size,
        fastest_xfer_size=parent.fastest_xfer_size,
        first_sect=first_sect,
        sect_count=sect_count,
        backing_dev=backing,
    )


def _probe(volume: Volume, fs_probe: Optional[FsProbe]) -> None:
    if fs_probe is None:
        return
    guid, label = fs_probe(volume)
    volume.guid = guid
    volume.fslabel = label


def _gpt_get_part(volume: Volume, partition: int,
                  fs_probe: Optional[FsProbe]) -> Optional[Volume]:
    found = _read_gpt_header(volume)
    if found is None:
        raise InvalidTableError("no GPT signature")
    lb_size, header = found
    if header[1] != _GPT_REVISION:
        raise InvalidTableError("unsupported GPT revision")
    entry_lba, entry_count = header[10], header[11]
    if partition < 0 or partition >= entry_count:
        raise EndOfTableError(f"partition {partition} past end of GPT")
    raw = _read_lenient(volume, entry_lba * lb_size + partition * _GPT_ENTRY.size,
                        _GPT_ENTRY.size)
    _, unique, start, end, _, _ = _GPT_ENTRY.unpack(raw)
    if unique == _EMPTY_GUID:
        return None
    ratio = lb_size // 512
    part = _derive(volume, partition + 1, start * ratio, (end - start + 1) * ratio, volume)
    _probe(part, fs_probe)
    part.part_guid = Guid.from_bytes(unique)
    return part


def is_valid_mbr(volume: Volume) -> bool:
    """Heuristically decide whether sector 0 holds an MBR partition table."""
    for off in (446, 462, 478, 494):
        if _read_lenient(volume, off, 1)[0] not in (0x00, 0x80):
            return False
    if _read_lenient(volume, 4, 8) == b"_ECH_FS_":
        return False
    if _read_lenient(volume, 3, 4) == b"NTFS":
        return False
    if _read_lenient(volume, 54, 3) == b"FAT":
        return False
    if _read_lenient(volume, 82, 3) == b"FAT":
        return False
    if _read_lenient(volume, 3, 5) == b"FAT32":
        return False
    if int.from_bytes(_read_lenient(volume, 1080, 2), "little") == 0xEF53:
        return False
    return True


def mbr_get_id(volume: Volume) -> int:
    """The 32-bit MBR disk signature, or 0 if there is no valid MBR."""
    if not is_valid_mbr(volume):
        return 0
    return int.from_bytes(_read_lenient(volume, 0x1B8, 4), "little")


def _mbr_entry(volume: Volume, offset: int) -> tuple:
    return _MBR_ENTRY.unpack(_read_lenient(volume, offset, _MBR_ENTRY.size))


def _mbr_get_logical_part(extended: Volume, partition: int,
                          fs_probe: Optional[FsProbe]) -> Optional[Volume]:
    ebr_sector = 0
    for _ in range(partition):
        entry = _mbr_entry(extended, ebr_sector * 512 + 0x1CE)
        if entry[2] not in _EXTENDED_TYPES:
            raise EndOfTableError(f"logical partition {partition} past end of chain")
        ebr_sector = entry[4]
    entry = _mbr_entry(extended, ebr_sector * 512 + 0x1BE)
    if entry[2] == 0:
        return None
    part = _derive(extended, partition + 4 + 1,
                   extended.first_sect + ebr_sector + entry[4], entry[5],
                   extended.backing_dev)
    _probe(part, fs_probe)
    return part


def _mbr_get_part(volume: Volume, partition: int,
                  fs_probe: Optional[FsProbe]) -> Optional[Volume]:
    if not is_valid_mbr(volume):
        raise InvalidTableError("no valid MBR")
    if partition > 3:
        for i in range(4):
            entry = _mbr_entry(volume, 0x1BE + _MBR_ENTRY.size * i)
            if entry[2] not in _EXTENDED_TYPES:
                continue
            extended = _derive(volume, i + 1, entry[4], entry[5], volume)
            return _mbr_get_logical_part(extended, partition - 4, fs_probe)
        raise EndOfTableError(f"partition {partition} past end of MBR")
    if partition < 0:
        raise EndOfTableError(f"invalid partition number {partition}")
    entry = _mbr_entry(volume, 0x1BE + _MBR_ENTRY.size * partition)
    if entry[2] == 0:
        return None
    part = _derive(volume, partition + 1, entry[4], entry[5], volume)
    _probe(part, fs_probe)
    return part


def get_partition(volume: Volume, partition: int,
                  fs_probe: Optional[FsProbe] = None) -> Optional[Volume]:
    """Look up the 0-based ``partition`` on ``volume`` via GPT, then MBR.

    Returns None for an unused slot. Raises InvalidTableError when neither
    table is present and EndOfTableError past the end of the table.
    ``fs_probe`` may return a ``(guid, label)`` pair for a found partition.
    """
    try:
        return _gpt_get_part(volume, partition, fs_probe)
    except InvalidTableError:
        pass
    return _mbr_get_part(volume, partition, fs_probe)


class VolumeIndex:
    """The set of known volumes, searchable by GUID, label or coordinates."""

    def __init__(self, volumes: Optional[list[Volume]] = None):
        self.volumes: list[Volume] = list(volumes or [])

    def __len__(self) -> int:
        return len(self.volumes)

    def __iter__(self) -> Iterator[Volume]:
        return iter(self.volumes)

    def add(self, volume: Volume) -> Volume:
        """Register a volume and return it."""
        self.volumes.append(volume)
        return volume

    def by_guid(self, guid: Guid) -> Optional[Volume]:
        """First volume whose filesystem or partition GUID matches."""
        for volume in self.volumes:
            if volume.guid is not None and volume.guid == guid:
                return volume
            if volume.part_guid is not None and volume.part_guid == guid:
                return volume
        return None

    def by_fslabel(self, label: str) -> Optional[Volume]:
        """First volume with the given filesystem label."""
        return next((v for v in self.volumes if v.fslabel is not None and v.fslabel == label),
                    None)

    def by_coord(self, optical: bool, drive: int, partition: int) -> Optional[Volume]:
        """The volume at the given drive and partition coordinates."""
        return next(
            (v for v in self.volumes
             if v.index == drive and v.is_optical == optical and v.partition == partition),
            None,
        )

    def iterate_parts(self, volume: Volume) -> Iterator[Volume]:
        """Yield the whole disk behind ``volume`` and then each of its partitions."""
        if volume.pxe:
            yield volume
            return
        root = volume
        while root.backing_dev is not None:
            root = root.backing_dev
        numbers = [v.partition for v in self.volumes
                   if v.index == root.index and v.is_optical == root.is_optical]
        highest = max(numbers, default=-1)
        part_cnt = -1
        for partno in _count():
            if part_cnt > root.max_partition or partno > highest:
                break
            part = self.by_coord(root.is_optical, root.index, partno)
            if part is None:
                continue
            part_cnt += 1
            yield part

    def describe(self) -> str:
        """A text listing of every volume's main properties."""
        lines = []
        for v in self.volumes:
            lines += [
                f"index: {v.index}",
                f"is_optical: {int(v.is_optical)}",
                f"partition: {v.partition}",
                f"fslabel: {v.fslabel if v.fslabel is not None else '(null)'}",
                f"sector_size: {v.sector_size}",
                f"max_partition: {v.max_partition}",
                f"first_sect: {v.first_sect}",
                f"sect_count: {v.sect_count}",
                "---",
            ]
        return "".join(line + "\n" for line in lines)