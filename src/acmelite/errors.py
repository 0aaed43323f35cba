"""acmelite errors."""
from typing import Any
from typing import Iterable
from typing import Mapping
from typing import Optional


class Error(Exception):
    """Generic acmelite error."""


class ConfigurationError(Error):
    """Invalid user-supplied configuration."""


class KeyStorageError(Error):
    """Persisted account key could not be read or written."""


class KeyNotFound(KeyStorageError):
    """No account key has been persisted yet."""


class ClientError(Error):
    """Network error."""


class NonceError(ClientError):
    """Server response nonce error."""


class BadNonce(NonceError):
    """Bad nonce error."""
    def __init__(self, nonce: str, error: Exception, *args: Any) -> None:
        super().__init__(*args)
        self.nonce = nonce
        self.error = error

    def __str__(self) -> str:
        return 'Invalid nonce ({0!r}): {1}'.format(self.nonce, self.error)


class NonceUnavailableError(NonceError):
    """Nonce probe response did not carry a replay nonce.

    :ivar headers: Mapping of HTTP headers

    """
    def __init__(self, headers: Mapping, *args: Any) -> None:
        super().__init__(*args)
        self.headers = dict(headers)

    def __str__(self) -> str:
        return ('Server response did not include a replay '
                'nonce, headers: {0} (This may be a service outage)'.format(
                    self.headers))


class TransportError(ClientError):
    """Connection or I/O failure while talking to the authority."""
    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(url, cause)

    def __str__(self) -> str:
        return 'Requesting {0}: {1}'.format(self.url, self.cause)


class SigningError(Error):
    """Signed envelope could not be built.

    :ivar Exception cause: The failure of the nonce or key dependency.

    """
    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(cause)

    def __str__(self) -> str:
        return 'Unable to sign request: {0}'.format(self.cause)


class SerializationError(Error):
    """Payload could not be serialized to canonical JSON."""


class ProtocolError(Error):
    """Unexpected authority response.

    :ivar int status_code: HTTP status of the response.
    :ivar str body: Raw response body, verbatim.

    """
    description = 'Unexpected response from the authority'

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(status_code, body)

    def __str__(self) -> str:
        return '{0} (HTTP {1}): {2}'.format(
            self.description, self.status_code, self.body)


class RegistrationError(ProtocolError):
    """Account registration was refused."""
    description = 'Failed to register account'


class AgreementError(ProtocolError):
    """Terms of service agreement was refused."""
    description = 'Failed to accept terms of service'


class AuthorizationError(ProtocolError):
    """New authorization was refused."""
    description = 'Failed to create new authorization'


class ChallengeNotFoundError(Error):
    """Authorization did not offer the requested challenge type."""
    def __init__(self, hostname: str, typ: str,
                 offered: Optional[Iterable[str]] = None) -> None:
        self.hostname = hostname
        self.typ = typ
        self.offered = tuple(offered or ())
        super().__init__(hostname, typ)

    def __str__(self) -> str:
        return 'No {0} challenge offered for {1} (offered: {2})'.format(
            self.typ, self.hostname, ', '.join(self.offered) or 'none')
