"""Helper utility functions."""


def hexdump(data: bytes, width: int = 8) -> str:
    """Format bytes as offset/hex/ASCII lines.

    Args:
        data: Bytes to format
        width: Number of bytes per line

    Returns:
        Multi-line string, one line per ``width`` bytes
    """
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset : offset + width]
        hex_part = " ".join(f"{b:02x}" for b in chunk).ljust(width * 3 - 1)
        text_part = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"{offset:04x}  {hex_part}  {text_part}")
    return "\n".join(lines)


def parse_int(value: str) -> int:
    """Parse an integer literal in any base Python accepts (``0x090F``, ``2319``)."""
    return int(value, 0)
