"""Encoding detection utilities"""

import chardet


FALLBACK_ENCODINGS = ['cp1252', 'latin-1']


def detect_encoding(raw: bytes) -> str:
    """
    Detect the encoding of raw text bytes

    Args:
        raw: File content

    Returns:
        Detected encoding string
    """
    # Check for BOM
    if raw.startswith(b'\xef\xbb\xbf'):
        return 'utf-8-sig'

    # Valid UTF-8 is almost never an accident
    try:
        raw.decode('utf-8')
        return 'utf-8'
    except UnicodeDecodeError:
        pass

    sample = raw[:8192]
    result = chardet.detect(sample)
    if result['encoding'] and result['confidence'] > 0.7:
        return result['encoding']

    for encoding in FALLBACK_ENCODINGS:
        try:
            raw.decode(encoding)
            return encoding
        except (UnicodeDecodeError, LookupError):
            continue

    # Final fallback
    return 'latin-1'
