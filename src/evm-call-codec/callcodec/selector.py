from Crypto.Hash import keccak as _keccak


def keccak256(data: bytes) -> bytes:
    hasher = _keccak.new(digest_bits=256)
    hasher.update(data)
    return hasher.digest()


def selector_bytes(signature: str) -> bytes:
    # lone surrogates hash as their UTF-8 byte pattern instead of raising
    return keccak256(signature.encode("utf-8", errors="surrogatepass"))[:4]


def selector(signature: str) -> str:
    """First 4 bytes of keccak-256(signature) as 8 lowercase hex chars."""
    return selector_bytes(signature).hex()
