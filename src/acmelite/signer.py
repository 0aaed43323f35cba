"""Signed envelope construction."""
from concurrent import futures
import json
import logging
from typing import Any
from typing import Mapping
from typing import Union

import josepy as jose

from acmelite import errors
from acmelite import jws
from acmelite.keys import KeyManager
from acmelite.nonce import NonceSource

logger = logging.getLogger(__name__)

Payload = Union[jose.JSONDeSerializable, Mapping[str, Any]]


def canonical_json(payload: Payload) -> bytes:
    """Serialize ``payload`` to canonical JSON bytes.

    Keys are sorted and separators carry no whitespace, so the same
    payload always signs over the same bytes.

    :raises .SerializationError: if ``payload`` is not JSON serializable.

    """
    try:
        if isinstance(payload, jose.JSONDeSerializable):
            jobj = payload.to_json()
        else:
            jobj = payload
        return json.dumps(jobj, sort_keys=True, separators=(',', ':'),
                          ensure_ascii=False).encode('utf-8')
    except (TypeError, ValueError, jose.SerializationError) as error:
        raise errors.SerializationError(
            'Cannot serialize payload: {0}'.format(error)) from error


class RequestSigner:
    """Wraps payloads in a JWS bound to a fresh nonce and the account key.

    :ivar .KeyManager keys:
    :ivar .NonceSource nonces:
    :ivar josepy.JWASignature alg: Algorithm to use in signing JWS.

    """
    def __init__(self, keys: KeyManager, nonces: NonceSource,
                 alg: jose.JWASignature = jose.RS256) -> None:
        self.keys = keys
        self.nonces = nonces
        self.alg = alg

    def sign(self, payload: Payload) -> jws.JWS:
        """Build the signed envelope for ``payload``.

        The nonce and the key have no data dependency on each other, so
        they are resolved at the same time.

        :raises .SerializationError: if the payload cannot be serialized.
        :raises .SigningError: if the nonce or the key cannot be obtained,
            or signing itself fails.

        """
        jobj = canonical_json(payload)
        logger.debug('JWS payload:\n%s', jobj)

        with futures.ThreadPoolExecutor(max_workers=2) as pool:
            nonce_future = pool.submit(self.nonces.get_nonce)
            key_future = pool.submit(self.keys.get_key)
            try:
                nonce = nonce_future.result()
                key = key_future.result()
            except errors.Error as error:
                raise errors.SigningError(error) from error

        if not isinstance(key, self.alg.kty):
            raise errors.SigningError(TypeError(
                '{0} cannot sign with {1}'.format(type(key).__name__, self.alg.name)))
        try:
            return jws.JWS.sign(jobj, key=key, alg=self.alg,
                                nonce=jws.decode_nonce(nonce))
        except jose.Error as error:
            raise errors.SigningError(error) from error
