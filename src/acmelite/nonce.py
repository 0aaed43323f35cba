"""Replay nonce bookkeeping."""
import logging
import threading
from typing import Optional
from typing import TYPE_CHECKING

import josepy as jose

from acmelite import errors
from acmelite import jws
from acmelite import messages

if TYPE_CHECKING:
    from acmelite.transport import Transport  # pragma: no cover

logger = logging.getLogger(__name__)


class NonceSource:
    """Single-slot cache of the most recently received replay nonce.

    Every response from the authority may carry a fresh nonce, which
    `observe` stores for the next signed request. When the slot is
    empty, `get_nonce` probes the authority's directory with a ``HEAD``
    request instead.

    Consumption and storage are atomic, but two signed calls issued at
    once for the same account would still compete for the one cached
    nonce: callers must serialize them.

    :ivar .Transport transport: Used for the probe.
    :ivar .messages.Target directory: Probe target.

    """
    def __init__(self, transport: 'Transport', directory: messages.Target) -> None:
        self.transport = transport
        self.directory = directory.update(method='HEAD')
        self._nonce: Optional[str] = None
        self._lock = threading.Lock()

    def observe(self, nonce: str) -> None:
        """Store ``nonce`` received on any response, replacing the cached one.

        :raises .BadNonce: if ``nonce`` is not JOSE Base64.

        """
        self._validate(nonce)
        logger.debug('Storing nonce: %s', nonce)
        with self._lock:
            self._nonce = nonce

    def get_nonce(self) -> str:
        """Hand out a nonce that has never been handed out before.

        :raises .NonceUnavailableError: if the probe response lacks the
            replay nonce header.

        """
        with self._lock:
            nonce, self._nonce = self._nonce, None
        if nonce is not None:
            return nonce

        logger.debug('Requesting fresh nonce')
        response = self.transport.exchange(self.directory)
        nonce = response.nonce
        if not nonce:
            raise errors.NonceUnavailableError(response.headers)
        self._validate(nonce)
        with self._lock:
            # the transport already stored the probe's nonce; it is ours now
            if self._nonce == nonce:
                self._nonce = None
        return nonce

    @property
    def cached(self) -> Optional[str]:
        """Currently cached nonce, without consuming it."""
        return self._nonce

    @staticmethod
    def _validate(nonce: str) -> None:
        try:
            jws.decode_nonce(nonce)
        except jose.DeserializationError as error:
            raise errors.BadNonce(nonce, error)
