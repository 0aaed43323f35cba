"""ACME client API."""
import http.client as http_client
import logging
from typing import Dict
from typing import Optional
from typing import Type
from typing import Union
from urllib import parse

import josepy as jose

from acmelite import challenges
from acmelite import constants
from acmelite import errors
from acmelite import messages
from acmelite.configuration import ClientConfig
from acmelite.keys import FileKeyStorage
from acmelite.keys import KeyManager
from acmelite.nonce import NonceSource
from acmelite.signer import Payload
from acmelite.signer import RequestSigner
from acmelite.transport import Transport

logger = logging.getLogger(__name__)

STATE_UNREGISTERED = 'unregistered'
STATE_REGISTERING = 'registering'
STATE_AWAITING_AGREEMENT = 'awaiting-agreement'
STATE_REGISTERED = 'registered'

STATE_UNAUTHORIZED = 'unauthorized'
STATE_REQUESTING_AUTHORIZATION = 'requesting-authorization'
STATE_AUTHORIZED = 'authorized'

Endpoint = Union[str, messages.Target]
Outcome = Union[messages.Conflict, messages.Success, messages.Failure]


class ProtocolClient:
    """ACME client driving the registration/authorization handshake.

    Signed calls for one account must not be issued concurrently; they
    share a single cached replay nonce.

    :ivar .RequestSigner signer:
    :ivar .Transport transport:
    :ivar str state: Registration state, one of the ``STATE_*`` constants.
    :ivar dict authorization_states: Authorization state per hostname.
    :ivar .RegistrationResource regr: Result of the last successful
        `register` call.

    """

    def __init__(self, signer: RequestSigner, transport: Transport,
                 host: str = constants.DEFAULT_SERVER_HOST,
                 scheme: str = constants.DEFAULT_SCHEME) -> None:
        """Initialize.

        :param .RequestSigner signer: Wraps payloads in JWS.
        :param .Transport transport: Sends signed payloads.
        :param str host: Authority host for named protocol paths.
        :param str scheme: ``https``, or ``http`` for local test servers.
        """
        self.signer = signer
        self.transport = transport
        self.host = host
        self.scheme = scheme
        self.state = STATE_UNREGISTERED
        self.authorization_states: Dict[str, str] = {}
        self.regr: Optional[messages.RegistrationResource] = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> 'ProtocolClient':
        """Wire up key, nonce, signing and transport from ``config``."""
        transport = Transport(user_agent=config.user_agent,
                              verify_ssl=config.verify_ssl,
                              timeout=config.timeout)
        nonces = NonceSource(transport, config.directory_target)
        transport.nonce_observer = nonces.observe
        keys = KeyManager(FileKeyStorage(config.key_path), bits=config.rsa_key_size)
        return cls(RequestSigner(keys, nonces), transport,
                   host=config.server_host, scheme=config.scheme)

    def close(self) -> None:
        """Release network resources."""
        self.transport.close()

    @property
    def server(self) -> str:
        """Base URL of the authority."""
        return '{0}://{1}'.format(self.scheme, self.host)

    def authorization_state(self, hostname: str) -> str:
        """Authorization state for ``hostname``."""
        return self.authorization_states.get(hostname, STATE_UNAUTHORIZED)

    def call(self, endpoint: Endpoint, payload: Payload) -> messages.AuthorityResponse:
        """Sign ``payload`` and POST it to ``endpoint``.

        :param endpoint: Protocol path on the authority (e.g.
            ``/acme/new-reg``), absolute URL, or `.Target`.
        :param payload: Request body, signed before sending.

        :raises .SigningError: if the envelope cannot be built.
        :raises .SerializationError: if ``payload`` is not serializable.
        :raises .TransportError: in case of network problems.

        :returns: Response, whatever its status.
        :rtype: `.AuthorityResponse`

        """
        target = self._resolve(endpoint)
        envelope = self.signer.sign(payload)
        return self.transport.exchange(target, envelope.json_dumps().encode('utf-8'))

    def register(self) -> messages.RegistrationResource:
        """Register the account key and accept the terms of service.

        An account that already exists for the key is not an error.

        :raises .RegistrationError: if the authority refuses the
            registration or reports a non-valid account.
        :raises .AgreementError: if the terms of service agreement is
            refused.

        :returns: Registration Resource. Its body is empty when the
            account existed already.
        :rtype: `.RegistrationResource`

        """
        self.state = STATE_REGISTERING
        try:
            regr = self._register()
        except Exception:
            self.state = STATE_UNREGISTERED
            raise
        self.state = STATE_REGISTERED
        self.regr = regr
        return regr

    def _register(self) -> messages.RegistrationResource:
        response = self.call(constants.NEW_REG_PATH, messages.NewRegistration())
        outcome = self._decode(response, http_client.CREATED,
                               body_cls=messages.Registration, allow_conflict=True)

        if isinstance(outcome, messages.Conflict):
            logger.info('Account already exists')
            return messages.RegistrationResource(
                body=messages.Registration(), uri=response.location)
        if isinstance(outcome, messages.Failure):
            raise errors.RegistrationError(outcome.status_code, outcome.body)

        reg = outcome.body
        if reg.account_status != messages.STATUS_VALID:
            raise errors.RegistrationError(response.status_code, response.body)

        terms_of_service = response.links.get(
            constants.TERMS_OF_SERVICE_REL, {}).get('url')
        location = response.location
        if terms_of_service is None or location is None:
            logger.debug('Registration response lacks terms of service or location')
            raise errors.RegistrationError(response.status_code, response.body)
        uri = parse.urljoin(self.server, location)

        self.state = STATE_AWAITING_AGREEMENT
        agreement = self.call(messages.Target.from_url(uri),
                              messages.UpdateRegistration(agreement=terms_of_service))
        outcome = self._decode(agreement, http_client.ACCEPTED)
        if isinstance(outcome, messages.Failure):
            raise errors.AgreementError(outcome.status_code, outcome.body)

        logger.info('Registered account %s', uri)
        return messages.RegistrationResource(
            body=reg, uri=uri, terms_of_service=terms_of_service)

    def new_authorization(self, hostname: str,
                          typ: str = challenges.HTTP01.typ) -> messages.ChallengeBody:
        """Request authorization for ``hostname``.

        :param str hostname: DNS name to authorize.
        :param str typ: Challenge type to select.

        :raises .AuthorizationError: if the authority refuses.
        :raises .ChallengeNotFoundError: if no challenge of type ``typ``
            is offered.

        :returns: The offered challenge of type ``typ``.
        :rtype: `.ChallengeBody`

        """
        self.authorization_states[hostname] = STATE_REQUESTING_AUTHORIZATION
        try:
            challb = self._new_authorization(hostname, typ)
        except Exception:
            self.authorization_states[hostname] = STATE_UNAUTHORIZED
            raise
        self.authorization_states[hostname] = STATE_AUTHORIZED
        return challb

    def _new_authorization(self, hostname: str, typ: str) -> messages.ChallengeBody:
        response = self.call(constants.NEW_AUTHZ_PATH,
                             messages.NewAuthorization.for_hostname(hostname))
        outcome = self._decode(response, http_client.CREATED,
                               body_cls=messages.Authorization)
        if isinstance(outcome, messages.Failure):
            raise errors.AuthorizationError(outcome.status_code, outcome.body)

        authz = outcome.body
        challb = authz.find_challenge(typ)
        if challb is None:
            raise errors.ChallengeNotFoundError(hostname, typ, authz.offered_types)
        if (isinstance(challb.chall, challenges.UnrecognizedChallenge)
                and typ in challenges.Challenge.TYPES):
            logger.debug('Offered %s challenge is malformed: %r', typ, challb.chall.jobj)
            raise errors.AuthorizationError(response.status_code, response.body)
        logger.debug('Selected %s challenge for %s', typ, hostname)
        return challb

    def _resolve(self, endpoint: Endpoint) -> messages.Target:
        if isinstance(endpoint, messages.Target):
            return endpoint
        if parse.urlsplit(endpoint).scheme:
            return messages.Target.from_url(endpoint)
        return messages.Target.for_path(endpoint, host=self.host, scheme=self.scheme)

    @classmethod
    def _decode(cls, response: messages.AuthorityResponse, expected: int,
                body_cls: Optional[Type[jose.JSONObjectWithFields]] = None,
                allow_conflict: bool = False) -> Outcome:
        """Decode ``response`` once into Conflict, Success or Failure."""
        if allow_conflict and response.status_code == http_client.CONFLICT:
            return messages.Conflict(response=response)
        if response.status_code != expected:
            return messages.Failure(status_code=response.status_code, body=response.body)
        if body_cls is None:
            return messages.Success(response=response, body=None)
        try:
            body = body_cls.from_json(response.json())
        except (ValueError, TypeError, jose.DeserializationError) as error:
            logger.debug('Cannot decode %s: %s', body_cls.__name__, error)
            return messages.Failure(status_code=response.status_code, body=response.body)
        return messages.Success(response=response, body=body)
