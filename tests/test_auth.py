import asyncio
import base64
import datetime
import json
import time

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.x509.oid import NameOID
from fastapi import HTTPException

from talentnest import auth

PROJECT_ID = "talentnest-test"


def b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


@pytest.fixture(scope="module")
def signing_key():
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "securetoken.test")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )
    return key, cert.public_bytes(serialization.Encoding.PEM).decode()


@pytest.fixture
def google_keys(monkeypatch, signing_key):
    _, cert_pem = signing_key

    async def fake_keys(force_refresh=False):
        return {"kid-1": cert_pem}

    monkeypatch.setattr(auth, "get_google_public_keys", fake_keys)
    monkeypatch.setattr(auth, "FIREBASE_PROJECT_ID", PROJECT_ID)


def make_token(key, kid="kid-1", **overrides):
    now = int(time.time())
    claims = {
        "aud": PROJECT_ID,
        "iss": f"https://securetoken.google.com/{PROJECT_ID}",
        "sub": "firebase-uid-42",
        "email": "ada@example.com",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    header = b64(json.dumps({"alg": "RS256", "kid": kid}).encode())
    payload = b64(json.dumps(claims).encode())
    signature = key.sign(f"{header}.{payload}".encode(), padding.PKCS1v15(), hashes.SHA256())
    return f"{header}.{payload}.{b64(signature)}"


def verify(token):
    return asyncio.run(auth.verify_firebase_token(token))


def test_valid_token_returns_claims(google_keys, signing_key):
    claims = verify(make_token(signing_key[0]))

    assert claims["sub"] == "firebase-uid-42"
    assert claims["email"] == "ada@example.com"


@pytest.mark.parametrize(
    "overrides,detail",
    [
        ({"aud": "someone-else"}, "Invalid token audience"),
        ({"iss": "https://evil.example"}, "Invalid token issuer"),
        ({"exp": 1}, "Token has expired. Please refresh your session."),
        ({"iat": int(time.time()) + 3600}, "Invalid token"),
    ],
)
def test_bad_claims_rejected(google_keys, signing_key, overrides, detail):
    with pytest.raises(HTTPException) as exc:
        verify(make_token(signing_key[0], **overrides))

    assert exc.value.status_code == 401
    assert exc.value.detail == detail


def test_signature_from_another_key_rejected(google_keys):
    other = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    with pytest.raises(HTTPException) as exc:
        verify(make_token(other))

    assert exc.value.detail == "Invalid token signature"


def test_unknown_key_id_rejected(google_keys, signing_key):
    with pytest.raises(HTTPException) as exc:
        verify(make_token(signing_key[0], kid="kid-unknown"))

    assert exc.value.detail == "Unable to verify token signature"


def test_malformed_token_rejected(google_keys):
    with pytest.raises(HTTPException) as exc:
        verify("not-a-jwt")

    assert exc.value.status_code == 401


def test_unregistered_user_is_told_to_register(db):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(auth.get_current_user({"sub": "nobody", "email": "x@example.com"}, db))

    assert exc.value.status_code == 403
    assert exc.value.headers == {"X-Registration-Required": "true"}


def test_suspended_user_blocked(db, make_user):
    user = make_user("student", is_active=False)

    with pytest.raises(HTTPException) as exc:
        asyncio.run(auth.get_current_user({"sub": user.auth_uid}, db))

    assert exc.value.detail == "Account suspended"
