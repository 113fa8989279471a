import pytest

from studio.passwords import MalformedDigest, hash_password, verify_password

FAST = "pbkdf2:sha256:1000"


def test_verify_accepts_own_hash_across_resalting():
    for _ in range(3):
        digest = hash_password("s3cret!", method=FAST)
        assert verify_password("s3cret!", digest) is True


def test_hash_is_salted_per_call():
    a = hash_password("same", method=FAST)
    b = hash_password("same", method=FAST)
    assert a != b
    assert verify_password("same", a) and verify_password("same", b)


def test_default_method_is_scrypt():
    digest = hash_password("pw")
    assert digest.startswith("scrypt")
    assert verify_password("pw", digest)


def test_wrong_password_is_false_not_error():
    digest = hash_password("right", method=FAST)
    assert verify_password("wrong", digest) is False
    assert verify_password("", digest) is False


@pytest.mark.parametrize("bad", ["", "plaintext", "pbkdf2:sha256:1000$salt", "$salt$abcd", "pbkdf2$salt$not-hex", None])
def test_malformed_digest_raises(bad):
    with pytest.raises(MalformedDigest):
        verify_password("pw", bad)


def test_unknown_method_is_malformed():
    with pytest.raises(MalformedDigest):
        verify_password("pw", "md42$salt$abcdef")


def test_non_string_password_rejected_on_hash():
    with pytest.raises(TypeError):
        hash_password(1234)  # type: ignore[arg-type]
