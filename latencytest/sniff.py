"""
Content type detection from leading bytes.

Follows the WHATWG MIME sniffing signature table: at most the first 512 bytes
are considered and "application/octet-stream" is returned when nothing matches
and the data looks binary.
"""
import functools

SNIFF_LEN = 512

_WS = b"\t\n\x0c\r "

# bytes that never appear in plain text
_BINARY = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)

_HTML_TAGS = [
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
]

_RIFF_MASK = b"\xFF\xFF\xFF\xFF\x00\x00\x00\x00\xFF\xFF\xFF\xFF"


def _prefix(pattern: bytes, data: bytes) -> bool:
    return data.startswith(pattern)


def _masked(mask: bytes, pattern: bytes, data: bytes) -> bool:
    if len(data) < len(mask):
        return False
    return all(d & m == p for d, m, p in zip(data, mask, pattern))


def _html(tag: bytes, data: bytes) -> bool:
    data = data.lstrip(_WS)
    if len(data) < len(tag) + 1:
        return False
    for i, b in enumerate(tag):
        db = data[i]
        if 0x41 <= b <= 0x5A:
            db &= 0xDF
        if b != db:
            return False
    # the tag has to be terminated
    return data[len(tag)] in b" >"


def _xml(data: bytes) -> bool:
    return data.lstrip(_WS).startswith(b"<?xml")


def _mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0:
        return False
    if data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            # minor version number
            continue
        if data[start:start + 3] == b"mp4":
            return True
    return False


def _eot(data: bytes) -> bool:
    return len(data) >= 36 and data[34:36] == b"LP"


def _p(pattern):
    return functools.partial(_prefix, pattern)


def _riff(kind):
    return functools.partial(_masked, _RIFF_MASK, b"RIFF\x00\x00\x00\x00" + kind)


# checked in order; first match wins
SIGNATURES = [(functools.partial(_html, tag), "text/html; charset=utf-8") for tag in _HTML_TAGS] + [
    (_xml, "text/xml; charset=utf-8"),
    (_p(b"%PDF-"), "application/pdf"),
    (_p(b"%!PS-Adobe-"), "application/postscript"),
    (_p(b"\xFE\xFF"), "text/plain; charset=utf-16be"),
    (_p(b"\xFF\xFE"), "text/plain; charset=utf-16le"),
    (_p(b"\xEF\xBB\xBF"), "text/plain; charset=utf-8"),
    (_p(b"\x00\x00\x01\x00"), "image/x-icon"),
    (_p(b"\x00\x00\x02\x00"), "image/x-icon"),
    (_p(b"BM"), "image/bmp"),
    (_p(b"GIF87a"), "image/gif"),
    (_p(b"GIF89a"), "image/gif"),
    (functools.partial(_masked, _RIFF_MASK + b"\xFF\xFF", b"RIFF\x00\x00\x00\x00WEBPVP"), "image/webp"),
    (_p(b"\x89PNG\x0D\x0A\x1A\x0A"), "image/png"),
    (_p(b"\xFF\xD8\xFF"), "image/jpeg"),
    (functools.partial(_masked, _RIFF_MASK, b"FORM\x00\x00\x00\x00AIFF"), "audio/aiff"),
    (_p(b"ID3"), "audio/mpeg"),
    (_p(b"OggS\x00"), "application/ogg"),
    (_p(b"MThd\x00\x00\x00\x06"), "audio/midi"),
    (_riff(b"AVI "), "video/avi"),
    (_riff(b"WAVE"), "audio/wave"),
    (_mp4, "video/mp4"),
    (_p(b"\x1A\x45\xDF\xA3"), "video/webm"),
    (_eot, "application/vnd.ms-fontobject"),
    (_p(b"\x00\x01\x00\x00"), "font/ttf"),
    (_p(b"OTTO"), "font/otf"),
    (_p(b"ttcf"), "font/collection"),
    (_p(b"wOFF"), "font/woff"),
    (_p(b"wOF2"), "font/woff2"),
    (_p(b"\x1F\x8B\x08"), "application/x-gzip"),
    (_p(b"PK\x03\x04"), "application/zip"),
    (_p(b"Rar!\x1A\x07\x00"), "application/x-rar-compressed"),
    (_p(b"Rar!\x1A\x07\x01\x00"), "application/x-rar-compressed"),
    (_p(b"\x00\x61\x73\x6D"), "application/wasm"),
]


def detect_content_type(data: bytes) -> str:
    """Return the MIME type for ``data``; never fails."""
    data = data[:SNIFF_LEN]
    for match, ctype in SIGNATURES:
        if match(data):
            return ctype
    if not any(b in _BINARY for b in data.lstrip(_WS)):
        return "text/plain; charset=utf-8"
    return "application/octet-stream"
