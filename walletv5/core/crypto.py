from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

SIGNATURE_LENGTH = 64


def _signing_key(private_key: bytes) -> SigningKey:
    # 64-byte keys are libsodium secret keys: seed followed by the public key
    return SigningKey(bytes(private_key[:32]))


def sign(data: bytes, private_key: bytes) -> bytes:
    return _signing_key(private_key).sign(data).signature


def private_key_to_public_key(private_key: bytes) -> bytes:
    return _signing_key(private_key).verify_key.encode()


def verify(data: bytes, signature: bytes, public_key: bytes) -> bool:
    try:
        VerifyKey(public_key).verify(data, signature)
    except BadSignatureError:
        return False
    return True
