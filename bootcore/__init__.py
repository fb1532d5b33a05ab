"""Boot-loader core: text parsing, GUIDs, partition tables, URIs, formatting, time, random numbers and framebuffers."""

__version__ = "0.1.0"

__all__ = [
    "textutil",
    "guid",
    "part",
    "rand",
    "fmt",
    "timeutil",
    "uri",
    "framebuffer",
]