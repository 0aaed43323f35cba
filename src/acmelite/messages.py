"""ACME protocol messages."""
import json
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Tuple
from urllib import parse

import josepy as jose
from requests.structures import CaseInsensitiveDict
from requests.utils import parse_header_links

from acmelite import challenges
from acmelite import constants
from acmelite import fields

STATUS_UNKNOWN = 'unknown'
STATUS_PENDING = 'pending'
STATUS_PROCESSING = 'processing'
STATUS_VALID = 'valid'
STATUS_INVALID = 'invalid'
STATUS_REVOKED = 'revoked'

IDENTIFIER_FQDN = 'dns'  # IdentifierDNS in Boulder


class Identifier(jose.JSONObjectWithFields):
    """ACME identifier.

    :ivar str typ:
    :ivar str value:

    """
    typ: str = jose.field('type')
    value: str = jose.field('value')


class ResourceBody(jose.JSONObjectWithFields):
    """ACME Resource Body."""


class Registration(ResourceBody):
    """Registration Resource Body.

    :ivar jose.JWK key: Public key.
    :ivar tuple contact: Contact URIs (e.g. ``mailto:``),
        `tuple` of `str`.
    :ivar str agreement:
    :ivar str status: Account status.
    :ivar str legacy_status: Account status as reported by authorities
        that capitalize the member name (``Status``).

    """
    # on new-reg key server ignores 'key' and populates it based on
    # JWS.signature.combined.jwk
    key: jose.JWK = jose.field('key', omitempty=True, decoder=jose.JWK.from_json)
    contact: Tuple[str, ...] = jose.field('contact', omitempty=True, default=())
    agreement: str = jose.field('agreement', omitempty=True)
    status: str = jose.field('status', omitempty=True)
    legacy_status: str = jose.field('Status', omitempty=True)

    @property
    def account_status(self) -> Optional[str]:
        """Account status, whichever spelling the authority used."""
        return self.status or self.legacy_status


class NewRegistration(Registration):
    """New registration."""
    resource_type = 'new-reg'
    resource: str = fields.resource(resource_type)


class UpdateRegistration(Registration):
    """Update registration."""
    resource_type = 'reg'
    resource: str = fields.resource(resource_type)


class RegistrationResource(jose.JSONObjectWithFields):
    """Registration Resource.

    :ivar acmelite.messages.Registration body:
    :ivar str uri: Location of the account, if the authority sent one.
    :ivar str terms_of_service: URL for the CA TOS.

    """
    body: Registration = jose.field('body', decoder=Registration.from_json)
    uri: str = jose.field('uri', omitempty=True)
    terms_of_service: str = jose.field('terms_of_service', omitempty=True)


class ChallengeBody(ResourceBody):
    """Challenge Resource Body.

    :ivar acmelite.challenges.Challenge: Wrapped challenge.
        Conveniently, all challenge fields are proxied, i.e. you can
        call ``challb.x`` to get ``challb.chall.x`` contents.
    :ivar str uri: Where responses to this challenge are POSTed.
    :ivar str status:

    """
    __slots__ = ('chall',)
    uri: str = jose.field('uri', omitempty=True)
    status: str = jose.field('status', omitempty=True, default=STATUS_PENDING)

    def to_partial_json(self) -> Dict[str, Any]:
        jobj = super().to_partial_json()
        jobj.update(self.chall.to_partial_json())
        return jobj

    @classmethod
    def fields_from_json(cls, jobj: Mapping[str, Any]) -> Dict[str, Any]:
        jobj_fields = super().fields_from_json(jobj)
        jobj_fields['chall'] = challenges.Challenge.from_json(jobj)
        return jobj_fields

    def __getattr__(self, name: str) -> Any:
        return getattr(self.chall, name)


class Authorization(ResourceBody):
    """Authorization Resource Body.

    :ivar acmelite.messages.Identifier identifier:
    :ivar list challenges: `list` of `.ChallengeBody`
    :ivar str status:
    :ivar str expires:

    """
    identifier: Identifier = jose.field('identifier', decoder=Identifier.from_json, omitempty=True)
    challenges: List[ChallengeBody] = jose.field('challenges', omitempty=True, default=())
    status: str = jose.field('status', omitempty=True)
    expires: str = jose.field('expires', omitempty=True)

    # Mypy does not understand the josepy magic happening here, and falsely claims
    # that challenge is redefined. Let's ignore the type check here.
    @challenges.decoder  # type: ignore
    def challenges(value: List[Dict[str, Any]]) -> Tuple[ChallengeBody, ...]:  # type: ignore[misc]  # pylint: disable=no-self-argument,missing-function-docstring
        return tuple(ChallengeBody.from_json(chall) for chall in value)

    def find_challenge(self, typ: str) -> Optional[ChallengeBody]:
        """First challenge of type ``typ``, or ``None``."""
        for challb in self.challenges:  # pylint: disable=not-an-iterable
            if challb.chall.typ == typ:
                return challb
        return None

    @property
    def offered_types(self) -> Tuple[str, ...]:
        """Challenge types offered, in authority order."""
        return tuple(challb.chall.typ for challb in self.challenges)  # pylint: disable=not-an-iterable


class NewAuthorization(Authorization):
    """New authorization."""
    resource_type = 'new-authz'
    resource: str = fields.resource(resource_type)

    @classmethod
    def for_hostname(cls, hostname: str) -> 'NewAuthorization':
        """Request authorization for a DNS name."""
        return cls(identifier=Identifier(typ=IDENTIFIER_FQDN, value=hostname))


class Target(jose.ImmutableMap):
    """Endpoint descriptor for a single exchange.

    :ivar str scheme: ``http`` or ``https``.
    :ivar str host:
    :ivar int port: ``None`` for the scheme default.
    :ivar str method:
    :ivar str path: Path including any query string.

    """
    __slots__ = ('scheme', 'host', 'port', 'method', 'path')

    @classmethod
    def for_path(cls, path: str, host: str = constants.DEFAULT_SERVER_HOST,
                 scheme: str = constants.DEFAULT_SCHEME, method: str = 'POST',
                 port: Optional[int] = None) -> 'Target':
        """Named protocol path on an authority host."""
        return cls(scheme=scheme, host=host, port=port, method=method, path=path)

    @classmethod
    def from_url(cls, url: str, method: str = 'POST') -> 'Target':
        """Target parsed from an absolute URL, e.g. a ``Location`` header."""
        parsed = parse.urlsplit(url)
        if parsed.scheme not in ('http', 'https') or not parsed.hostname:
            raise ValueError('Not an absolute http(s) URL: {0!r}'.format(url))
        path = parsed.path or '/'
        if parsed.query:
            path += '?' + parsed.query
        return cls(scheme=parsed.scheme, host=parsed.hostname, port=parsed.port,
                   method=method, path=path)

    @property
    def url(self) -> str:
        """Absolute URL of the target."""
        netloc = self.host if self.port is None else '{0}:{1}'.format(self.host, self.port)
        return '{0}://{1}{2}'.format(self.scheme, netloc, self.path)


class AuthorityResponse(jose.ImmutableMap):
    """Fully buffered response from the authority.

    :ivar int status_code:
    :ivar headers: Case-insensitive header mapping.
    :ivar str body: Raw response body.

    """
    __slots__ = ('status_code', 'headers', 'body')

    def __init__(self, status_code: int, headers: Mapping[str, str], body: str) -> None:
        super().__init__(status_code=status_code,
                         headers=CaseInsensitiveDict(headers), body=body)

    def json(self) -> Any:
        """Decode the body as JSON.

        :raises ValueError: if the body is not JSON.

        """
        return json.loads(self.body)

    @property
    def links(self) -> Dict[str, Dict[str, str]]:
        """``Link`` header entries keyed by relation."""
        header = self.headers.get('Link')
        if not header:
            return {}
        links = {}
        for link in parse_header_links(header):
            key = link.get('rel') or link.get('url')
            links[key] = link
        return links

    @property
    def location(self) -> Optional[str]:
        """Value of the ``Location`` header."""
        return self.headers.get('Location')

    @property
    def nonce(self) -> Optional[str]:
        """Value of the replay nonce header."""
        return self.headers.get(constants.REPLAY_NONCE_HEADER)


class Conflict(jose.ImmutableMap):
    """The resource already exists (HTTP 409)."""
    __slots__ = ('response',)


class Success(jose.ImmutableMap):
    """Expected status; ``body`` holds the decoded resource body, if any."""
    __slots__ = ('response', 'body')


class Failure(jose.ImmutableMap):
    """Unexpected status or undecodable body."""
    __slots__ = ('status_code', 'body')
