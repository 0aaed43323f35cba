"""Account key management."""
import logging
import os
import threading
from typing import IO
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import rsa
import josepy as jose

from acmelite import constants
from acmelite import errors

logger = logging.getLogger(__name__)


def safe_open(path: str, mode: str = "w", chmod: Optional[int] = None) -> IO:
    """Safely open a file that must not exist yet.

    :param str path: Path to a file.
    :param str mode: Same os `mode` for `open`.
    :param int chmod: Same as `mode` for `os.open`, uses Python defaults
        if ``None``.

    """
    open_args = () if chmod is None else (chmod,)
    return os.fdopen(
        os.open(path, os.O_CREAT | os.O_EXCL | os.O_RDWR, *open_args), mode)


def generate_key(bits: int = 2048) -> jose.JWKRSA:
    """Generate a new RSA account key."""
    rsa_key = rsa.generate_private_key(
        public_exponent=constants.RSA_PUBLIC_EXPONENT, key_size=bits)
    return jose.JWKRSA(key=jose.ComparableRSAKey(rsa_key))


class FileKeyStorage:
    """Account key persisted as a JSON Web Key in a single file.

    :ivar str path: Location of the key file.

    """
    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> jose.JWK:
        """Load the persisted key.

        :raises .KeyNotFound: if nothing was persisted yet.
        :raises .KeyStorageError: if the file cannot be read or decoded.

        """
        try:
            with open(self.path, encoding='utf-8') as key_file:
                data = key_file.read()
        except FileNotFoundError:
            raise errors.KeyNotFound(
                'Account key at {0} does not exist'.format(self.path))
        except (OSError, UnicodeDecodeError) as error:
            raise errors.KeyStorageError(
                'Failed to read {0}: {1}'.format(self.path, error)) from error
        try:
            return jose.JWK.json_loads(data)
        except (jose.DeserializationError, ValueError) as error:
            raise errors.KeyStorageError(
                'Failed to decode {0}: {1}'.format(self.path, error)) from error

    def save(self, key: jose.JWK) -> None:
        """Persist ``key``; never overwrites an existing file.

        :raises .KeyStorageError: in case of I/O problems.

        """
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, 0o700, exist_ok=True)
            with safe_open(self.path, "w", chmod=0o400) as key_file:
                key_file.write(key.json_dumps())
        except OSError as error:
            raise errors.KeyStorageError(
                'Failed to write {0}: {1}'.format(self.path, error)) from error


class KeyManager:
    """Owns the account key for the lifetime of the process.

    The key is resolved lazily on the first `get_key` call: loaded from
    ``storage`` if it was persisted before, otherwise generated and
    persisted. Subsequent calls return the cached instance.

    :ivar storage: Object with ``load()`` and ``save(key)``, see
        `.FileKeyStorage`.
    :ivar int bits: RSA modulus size for newly generated keys.

    """
    def __init__(self, storage: FileKeyStorage, bits: int = 2048) -> None:
        self.storage = storage
        self.bits = bits
        self._key: Optional[jose.JWK] = None
        self._lock = threading.Lock()

    def get_key(self) -> jose.JWK:
        """Account key, loading or generating it on first use.

        :raises .KeyStorageError: if a persisted key exists but cannot
            be loaded, or a new key cannot be persisted.

        """
        with self._lock:
            if self._key is None:
                self._key = self._resolve()
            return self._key

    def _resolve(self) -> jose.JWK:
        try:
            key = self.storage.load()
        except errors.KeyNotFound:
            logger.info('Generating new %d-bit RSA account key', self.bits)
            key = generate_key(self.bits)
            self.storage.save(key)
            logger.debug('Account key saved')
        else:
            logger.debug('Loaded existing account key')
        return key
