"""ACME-specific JWS.

The JWS implementation in josepy only implements the base JOSE standard.
The authority additionally requires an anti-replay ``nonce`` in the
protected header, so this module layers an ACME header on top of josepy.
"""
from typing import Optional

import josepy as jose


class Header(jose.Header):
    """ACME-specific JOSE Header. Implements nonce."""
    nonce: Optional[bytes] = jose.field('nonce', omitempty=True, encoder=jose.encode_b64jose)

    # Mypy does not understand the josepy magic happening here, and falsely claims
    # that nonce is redefined. Let's ignore the type check here.
    @nonce.decoder  # type: ignore[no-redef,attr-defined,union-attr]
    def nonce(value: str) -> bytes:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        try:
            return jose.decode_b64jose(value)
        except jose.DeserializationError as error:
            raise jose.DeserializationError("Invalid nonce: {0}".format(error))


class Signature(jose.Signature):
    """ACME-specific Signature. Uses ACME-specific Header for customer fields."""
    __slots__ = jose.Signature._orig_slots  # type: ignore[attr-defined]  # pylint: disable=protected-access,no-member

    header_cls = Header
    header: Header = jose.field(
        'header', omitempty=True, default=header_cls(),
        decoder=header_cls.from_json)


class JWS(jose.JWS):
    """ACME-specific JWS. Includes nonce and jwk in protected header."""
    signature_cls = Signature
    __slots__ = jose.JWS._orig_slots  # type: ignore[attr-defined]  # pylint: disable=protected-access

    @classmethod
    # type: ignore[override]  # pylint: disable=arguments-differ
    def sign(cls, payload: bytes, key: jose.JWK, alg: jose.JWASignature,
             nonce: bytes) -> 'JWS':
        return super().sign(payload, key=key, alg=alg,
                            protect=frozenset(['nonce', 'jwk', 'alg']),
                            nonce=nonce, include_jwk=True)

    @property
    def nonce(self) -> Optional[bytes]:
        """Nonce bound into the protected header."""
        return self.signature.combined.nonce


def decode_nonce(value: str) -> bytes:
    """Decode a ``Replay-Nonce`` header value.

    :raises josepy.DeserializationError: if not JOSE Base64.

    """
    return Header._fields['nonce'].decode(value)  # pylint: disable=protected-access
