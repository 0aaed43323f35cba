"""ACME Identifier Validation Challenges.

Challenges are read-only values handed back to the caller; acmelite
does not provision or answer them.
"""
import logging
from typing import Any
from typing import cast
from typing import Dict
from typing import Mapping
from typing import Type
from typing import TypeVar
from typing import Union

import josepy as jose

logger = logging.getLogger(__name__)

GenericChallenge = TypeVar('GenericChallenge', bound='Challenge')


class Challenge(jose.TypedJSONObjectWithFields):
    # _fields_to_partial_json
    """ACME challenge."""
    TYPES: Dict[str, Type['Challenge']] = {}

    @classmethod
    def from_json(cls: Type[GenericChallenge],
                  jobj: Mapping[str, Any]) -> Union[GenericChallenge, 'UnrecognizedChallenge']:
        try:
            return cast(GenericChallenge, super().from_json(jobj))
        except jose.UnrecognizedTypeError as error:
            logger.debug(error)
            return UnrecognizedChallenge.from_json(jobj)
        except jose.DeserializationError as error:
            # a malformed entry must not sink the rest of the authorization
            logger.debug('Cannot decode challenge %r: %s', jobj, error)
            return UnrecognizedChallenge.from_json(jobj)


class UnrecognizedChallenge(Challenge):
    """Unrecognized challenge.

    Authorities may offer challenge types this module does not model,
    or entries of a known type that fail to decode. They are kept
    around, untouched, so that callers can still inspect them.

    :ivar jobj: Original JSON decoded object.

    """
    jobj: Dict[str, Any]

    def __init__(self, jobj: Mapping[str, Any]) -> None:
        super().__init__()
        object.__setattr__(self, "jobj", jobj)

    @property
    def typ(self) -> str:  # type: ignore[override]
        """Type advertised by the authority."""
        return self.jobj.get('type', '')  # pylint: disable=no-member

    def to_partial_json(self) -> Dict[str, Any]:
        return self.jobj  # pylint: disable=no-member

    @classmethod
    def from_json(cls, jobj: Mapping[str, Any]) -> 'UnrecognizedChallenge':
        return cls(jobj)


class _TokenChallenge(Challenge):
    """Challenge with token.

    :ivar str token: Opaque token chosen by the authority.

    """
    token: str = jose.field('token')


@Challenge.register
class HTTP01(_TokenChallenge):
    """ACME http-01 challenge."""
    typ = 'http-01'

    URI_ROOT_PATH = ".well-known/acme-challenge"
    """URI root path for the server provisioned resource."""

    @property
    def path(self) -> str:
        """Path (starting with '/') for provisioned resource."""
        return '/' + self.URI_ROOT_PATH + '/' + self.token

    def uri(self, domain: str) -> str:
        """URL the authority will fetch when validating ``domain``."""
        return 'http://' + domain + self.path


@Challenge.register
class DNS01(_TokenChallenge):
    """ACME dns-01 challenge."""
    typ = 'dns-01'

    LABEL = '_acme-challenge'

    def validation_domain_name(self, name: str) -> str:
        """Domain name for TXT validation record."""
        return '{0}.{1}'.format(self.LABEL, name)


@Challenge.register
class TLSSNI01(_TokenChallenge):
    """ACME tls-sni-01 challenge."""
    typ = 'tls-sni-01'
