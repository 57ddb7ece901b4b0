from utils.encoding import detect_encoding


def test_utf8_with_bom():
    assert detect_encoding("﻿MARK,α".encode("utf-8")) == "utf-8-sig"


def test_plain_utf8():
    assert detect_encoding("MARK,α\nG14,1".encode("utf-8")) == "utf-8"


def test_legacy_bytes_still_decode():
    raw = "MARK,Länge\nG14,1\n".encode("cp1252")

    encoding = detect_encoding(raw)

    assert encoding != "utf-8"
    assert raw.decode(encoding).startswith("MARK,")
