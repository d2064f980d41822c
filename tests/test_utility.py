import logging

import pytest

from emberkit.utility import decode_utf8, encode_utf8, log


@pytest.mark.parametrize("text", ["hello", "日本語のテキスト", "mixed ascii and ü", "\U0001F600"])
def test_round_trip(text):
    assert decode_utf8(encode_utf8(text)) == text


def test_empty_values():
    assert decode_utf8(b"") == ""
    assert encode_utf8("") == b""


def test_encode_matches_standard_utf8():
    text = "Résumé ☃"
    assert encode_utf8(text) == text.encode("utf-8")


def test_decode_invalid_bytes_are_replaced():
    assert decode_utf8(b"a\xffb") == "a\ufffdb"


def test_encode_lone_surrogate_is_replaced():
    assert encode_utf8("x\ud800") == b"x\xef\xbf\xbd"


def test_encode_joins_surrogate_pair():
    assert encode_utf8("\ud83d\ude00") == "\U0001F600".encode("utf-8")


def test_log_writes_message(caplog):
    with caplog.at_level(logging.DEBUG, logger="emberkit"):
        log("MyGame: Successfully initialized\n")
    assert [r.getMessage() for r in caplog.records] == ["MyGame: Successfully initialized"]