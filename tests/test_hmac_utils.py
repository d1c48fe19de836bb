"""Tests for webhook signature verification."""

import hashlib
import hmac

from kolide_relay.common import compute_hmac_sha256, verify_signature

BODY = b'{"event":"issues.new","id":"abc123"}'
SECRET = "s3cret"


def test_compute_matches_hmac_sha256_hex():
    expected = hmac.new(SECRET.encode(), BODY, hashlib.sha256).hexdigest()
    assert compute_hmac_sha256(BODY, SECRET) == expected


def test_valid_signature_verifies():
    assert verify_signature(BODY, compute_hmac_sha256(BODY, SECRET), SECRET)


def test_signature_comparison_is_case_insensitive():
    signature = compute_hmac_sha256(BODY, SECRET).upper()
    assert verify_signature(BODY, signature, SECRET)


def test_mutated_body_fails():
    signature = compute_hmac_sha256(BODY, SECRET)
    mutated = BODY.replace(b"abc123", b"abc124")
    assert not verify_signature(mutated, signature, SECRET)


def test_wrong_secret_fails():
    signature = compute_hmac_sha256(BODY, SECRET)
    assert not verify_signature(BODY, signature, "s3cres")


def test_malformed_signatures_return_false():
    good = compute_hmac_sha256(BODY, SECRET)
    for signature in ("sha256=" + good, good[:-2], "not-hex", "é" * 64, ""):
        assert verify_signature(BODY, signature, SECRET) is False


def test_empty_secret_round_trips():
    assert verify_signature(BODY, compute_hmac_sha256(BODY, ""), "")
    assert not verify_signature(BODY, compute_hmac_sha256(BODY, SECRET), "")
