# bootcore

Pure-Python building blocks for a boot loader: small text and integer
parsers, GUIDs, GPT/MBR partition tables read from disk images, resource
URIs of the form `resource://root/path#hash`, console message formatting,
calendar-to-Unix-time conversion, a Mersenne Twister generator and
framebuffer/wallpaper layout descriptions. It has no dependencies outside
the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `bootcore.textutil` – `isprint`, `isspace`, `digit_to_int`, `strtoui`
  (returns `(value, end)`), `parse_resolution` (`WIDTHxHEIGHT[xBPP]`, depth
  defaults to 32), `int_sqrt`, `trailing_zeros`, `oct2bin`, `hex2bin`,
  `bcd_to_int`, `int_to_bcd`, `absolute_path`, `inet_pton`, `div_roundup`,
  `align_up` and `align_down`.
- `bootcore.guid` – the `Guid` dataclass (`from_bytes`, `to_bytes`),
  `is_valid_guid`, `guid_from_string_be` and `guid_from_string_mixed`.
- `bootcore.part` – `BlockDevice` (an in-memory disk image), `Volume`
  (byte reads through a one-block cache), `get_partition` (GPT first, then
  MBR including logical partitions), `gpt_get_guid`, `is_valid_mbr`,
  `mbr_get_id`, the errors `PartitionTableError`, `InvalidTableError` and
  `EndOfTableError`, and `VolumeIndex` with `add`, `by_guid`, `by_fslabel`,
  `by_coord`, `iterate_parts` and `describe`.
- `bootcore.rand` – `MersenneTwister` (`seed`, `rand32`, `rand64`) and the
  module-level `srand`, `rand32` and `rand64` on a shared generator.
- `bootcore.fmt` – `format_message` for the formats `%s %S %d %u %x %D %U
  %X %p %c %#` (hex output is `0x`-prefixed, unknown conversions print `?`)
  and `serial_transform`, which turns newlines into CR LF and drops other
  non-printable characters except escape.
- `bootcore.timeutil` – `julian_day_number` and `unix_epoch`.
- `bootcore.uri` – `resolve_uri` returns a `Uri` (resource, root, path,
  hash, compressed); `parse_drive_partition`; `locate_volume` finds the
  volume for `hdd`, `odd`, `boot`, `guid`/`uuid` and `fslabel` URIs in a
  `VolumeIndex`; `verify_hash` checks a BLAKE2b-512 hex digest;
  `decompress_payload` un-gzips a file. Problems raise `UriError`.
- `bootcore.framebuffer` – `ImageLayout`, `Image` (`make_centered`,
  `make_stretched`) and `Framebuffer` (`clear`, `is_xrgb8888`).

## Examples

```python
from bootcore.textutil import parse_resolution
from bootcore.uri import resolve_uri
from bootcore.guid import guid_from_string_mixed
from bootcore.fmt import format_message
from bootcore.timeutil import unix_epoch

uri = resolve_uri("boot://1/kernel/vmlinuz")
print(uri.resource, uri.root, uri.path)      # boot 1 kernel/vmlinuz

print(parse_resolution("1024x768"))          # (1024, 768, 32)

guid = guid_from_string_mixed("01234567-89ab-cdef-0123-456789abcdef")
print(guid.to_bytes().hex())                 # 67452301ab89efcd0123456789abcdef

print(format_message("%s has %u parts at %x", "disk", 3, 255))
# disk has 3 parts at 0xff

print(unix_epoch(0, 0, 0, 1, 1, 2000))       # 946684800
```

Reading partitions from a disk image:

```python
from bootcore.part import BlockDevice, Volume, VolumeIndex, get_partition

with open("disk.img", "rb") as f:
    disk = Volume(device=BlockDevice(f.read()), index=1)

index = VolumeIndex([disk])
part = get_partition(disk, 0)   # None for an unused slot
if part is not None:
    index.add(part)
print(index.describe())
```

## What this package does not do

It has no command-line program, no interactive boot menu, no keyboard or
line-input handling and no editor for configuration entries. It does not
talk to real disks, firmware, terminals or networks: volumes are read from
byte strings held in memory, `tftp://` URIs are refused by
`locate_volume`, and filesystems are not parsed (a caller may pass an
`fs_probe` to `get_partition` to fill in a partition's GUID and label).
Images are described and laid out but not decoded or drawn.