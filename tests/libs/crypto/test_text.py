from __future__ import annotations

import base64

import pytest

from rc4kit.libs.crypto import (
    CiphertextFormatError,
    InvalidKey,
    TextDecodeError,
    TextEncodeError,
    decrypt_text,
    encrypt_text,
)
from rc4kit.libs.crypto.text import (
    decode_text,
    encode_text,
    format_ciphertext,
    parse_ciphertext,
)

KEY_PLAINTEXT_CT = bytes.fromhex("bbf316e8d940af0ad3")


# ===========================================================
# CIPHERTEXT FORMATS
# ===========================================================


def test_format_hex():
    assert format_ciphertext(KEY_PLAINTEXT_CT, "hex") == "bbf316e8d940af0ad3"


def test_format_base64():
    expected = base64.b64encode(KEY_PLAINTEXT_CT).decode("ascii")
    assert format_ciphertext(KEY_PLAINTEXT_CT, "base64") == expected


def test_format_raw_one_char_per_byte():
    rendered = format_ciphertext(KEY_PLAINTEXT_CT, "raw")
    assert len(rendered) == len(KEY_PLAINTEXT_CT)
    assert [ord(c) for c in rendered] == list(KEY_PLAINTEXT_CT)


def test_parse_hex_tolerates_whitespace_and_case():
    assert parse_ciphertext("BB F3 16 E8\nD9 40 AF 0A D3", "hex") == KEY_PLAINTEXT_CT


@pytest.mark.parametrize(
    "text, fmt",
    [
        ("abc", "hex"),
        ("zz", "hex"),
        ("not base64!", "base64"),
        ("abc", "base64"),
        ("€", "raw"),
    ],
)
def test_parse_rejects_malformed(text, fmt):
    with pytest.raises(CiphertextFormatError):
        parse_ciphertext(text, fmt)


def test_unknown_format():
    with pytest.raises(ValueError):
        format_ciphertext(b"", "octal")
    with pytest.raises(ValueError):
        parse_ciphertext("", "octal")


# ===========================================================
# TEXT ENCODINGS
# ===========================================================


def test_encode_latin1_rejects_wide_characters():
    with pytest.raises(TextEncodeError):
        encode_text("price: €5", "latin-1")


def test_decode_utf8_rejects_garbage():
    with pytest.raises(TextDecodeError):
        decode_text(b"\xff\xfe\xfa", "utf-8")


@pytest.mark.parametrize("func", [encode_text, decode_text])
def test_legacy_is_not_a_byte_encoding(func):
    arg = "x" if func is encode_text else b"x"
    with pytest.raises(ValueError):
        func(arg, "legacy")


def test_unknown_encoding():
    with pytest.raises(ValueError):
        encrypt_text("Key", "Plaintext", encoding="utf-32")


# ===========================================================
# ENCRYPT / DECRYPT TEXT
# ===========================================================


def test_known_vector_hex():
    assert encrypt_text("Key", "Plaintext") == "bbf316e8d940af0ad3"
    assert decrypt_text("Key", "bbf316e8d940af0ad3") == "Plaintext"


@pytest.mark.parametrize("encoding", ["utf-8", "latin-1"])
@pytest.mark.parametrize("fmt", ["hex", "base64", "raw"])
def test_roundtrip_all_formats(encoding, fmt):
    plaintext = "Café au lait"
    ct = encrypt_text("sécret", plaintext, encoding=encoding, output_format=fmt)
    assert decrypt_text("sécret", ct, encoding=encoding, output_format=fmt) == (
        plaintext
    )


def test_utf8_roundtrip_non_latin():
    plaintext = "你好, 世界 \U0001f510"
    ct = encrypt_text("钥匙", plaintext, output_format="base64")
    assert decrypt_text("钥匙", ct, output_format="base64") == plaintext


def test_empty_plaintext():
    assert encrypt_text("Key", "") == ""
    assert decrypt_text("Key", "") == ""


def test_empty_key_rejected():
    with pytest.raises(InvalidKey):
        encrypt_text("", "Plaintext")
    with pytest.raises(InvalidKey):
        decrypt_text("", "bbf316")


def test_max_key_length():
    assert encrypt_text("Key", "x", max_key_length=3)
    with pytest.raises(InvalidKey):
        encrypt_text("Keys", "x", max_key_length=3)


def test_drop_changes_output_and_roundtrips():
    ct = encrypt_text("Key", "Plaintext", drop=768)
    assert ct != "bbf316e8d940af0ad3"
    assert decrypt_text("Key", ct, drop=768) == "Plaintext"


def test_decrypt_invalid_utf8_raises():
    # keystream for "Key" starts with 0xeb, so 0x14 decrypts to 0xff
    with pytest.raises(TextDecodeError):
        decrypt_text("Key", "14")


def test_wrong_key_garbles_output():
    ct = encrypt_text("right", "Plaintext", encoding="latin-1")
    assert decrypt_text("wrong", ct, encoding="latin-1") != "Plaintext"


def test_error_messages_do_not_echo_input():
    with pytest.raises(TextEncodeError) as exc:
        encrypt_text("Key", "secret \u20ac", encoding="latin-1")
    assert "\u20ac" not in str(exc.value)
    assert "position 7" in str(exc.value)

    with pytest.raises(TextEncodeError) as exc:
        encrypt_text("k\u0151y", "x", encoding="latin-1")
    assert "\u0151" not in str(exc.value)

    with pytest.raises(CiphertextFormatError) as exc:
        parse_ciphertext("ab\u20ac", "raw")
    assert "\u20ac" not in str(exc.value)
    assert exc.value.__cause__ is None


# ===========================================================
# LEGACY MODE
# ===========================================================


def test_legacy_matches_browser_output_for_latin1():
    ct = encrypt_text("Key", "Plaintext", encoding="legacy", output_format="raw")
    assert ct == KEY_PLAINTEXT_CT.decode("latin-1")
    assert (
        decrypt_text("Key", ct, encoding="legacy", output_format="raw") == "Plaintext"
    )


def test_legacy_keeps_high_byte_of_code_units():
    # keystream starts eb 9f: 0x00E9 ^ 0xEB == 0x02, 0x20AC ^ 0x9F == 0x2033
    ct = encrypt_text("Key", "\u00e9\u20ac", encoding="legacy", output_format="raw")
    assert ct == "\x02\u2033"
    assert (
        decrypt_text("Key", ct, encoding="legacy", output_format="raw")
        == "\u00e9\u20ac"
    )


def test_legacy_key_units_reduced_mod_256():
    a = encrypt_text("K\u0165y", "Plaintext", encoding="legacy", output_format="raw")
    b = encrypt_text("Key", "Plaintext", encoding="legacy", output_format="raw")
    assert a == b


def test_legacy_roundtrip_astral():
    plaintext = "lock \U0001f512 ok"
    ct = encrypt_text("k", plaintext, encoding="legacy", output_format="raw")
    assert decrypt_text("k", ct, encoding="legacy", output_format="raw") == plaintext


def test_legacy_requires_raw():
    with pytest.raises(ValueError):
        encrypt_text("Key", "Plaintext", encoding="legacy", output_format="hex")
