from __future__ import annotations
import re

from app.utils.hash import content_fingerprint


def test_fingerprint_is_stable_and_case_insensitive():
    a = content_fingerprint("Senior Python Engineer", "Acme")
    b = content_fingerprint("  senior   PYTHON engineer ", " acme\n")
    c = content_fingerprint("Senior Python Engineer", "Acme Labs")
    d = content_fingerprint("Staff Python Engineer", "Acme")

    assert a == b
    assert a != c
    assert a != d


def test_fingerprint_is_32_hex_chars_for_any_input():
    for title, company in [("Developer", "Corp"), ("", ""), (None, None), ("Ingénieur", "Société Générale")]:
        assert re.fullmatch(r"[0-9a-f]{32}", content_fingerprint(title, company))


def test_fingerprint_keeps_title_and_company_apart():
    assert content_fingerprint("ab", "c") != content_fingerprint("a", "bc")
