"""NMEA helpers for passthrough text.

The receiver can wrap standard NMEA 0183 sentences in AI2 sub-packets. The
codec forwards that text verbatim; these helpers only split it into
sentences and check the XOR checksum so consumers can flag damaged lines.

Example sentence structure:
    $GNGGA,123519.00,4807.038,N,01131.000,E,1,08,0.9,545.4,M,47.0,M,,*7F
    ^                         checksum content                        ^^
    start                                                          checksum (0x7F = 127)
"""

__all__ = ["split_sentences", "validate_checksum"]


def split_sentences(raw_text: bytes) -> list[str]:
    """Split passthrough bytes into stripped, non-empty NMEA lines.

    Non-ASCII bytes are replaced rather than rejected, so a corrupted line
    still shows up (and then fails ``validate_checksum``).

    Example:
        >>> split_sentences(b"$GPGSA,...*1E\\r\\n$GPGGA,...*7F\\r\\n")
        ['$GPGSA,...*1E', '$GPGGA,...*7F']
    """
    text = raw_text.decode("ascii", errors="replace")
    return [line.strip() for line in text.splitlines() if line.strip()]


def _calculate_xor_checksum(content: str) -> int:
    result = 0
    for character in content:
        result ^= ord(character)
    return result


def validate_checksum(sentence: str) -> bool:
    """Validate the checksum of an NMEA sentence.

    Args:
        sentence: Complete sentence including '$', '*' and the two hex
            digits. Surrounding whitespace is ignored.

    Returns:
        True if the XOR of the characters between '$' and '*' equals the
        provided checksum, False if it differs or the sentence is malformed.
    """
    sentence = sentence.strip()
    if not sentence.startswith("$") or "*" not in sentence:
        return False

    end = sentence.index("*")
    provided = sentence[end + 1 : end + 3]
    if len(provided) != 2:
        return False

    try:
        return _calculate_xor_checksum(sentence[1:end]) == int(provided, 16)
    except ValueError:
        return False
