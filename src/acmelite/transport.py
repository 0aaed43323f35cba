"""HTTP exchanges with the authority."""
import logging
from typing import Callable
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from acmelite import constants
from acmelite import errors
from acmelite import messages

logger = logging.getLogger(__name__)


class Transport:
    """Wrapper around requests performing one buffered exchange at a time.

    Status codes are not interpreted here. Every replay nonce seen on a
    response is forwarded to ``nonce_observer``; one it rejects as
    malformed is logged and dropped, and the response is still returned.

    :param str user_agent: String to send as User-Agent header.
    :param bool verify_ssl: Whether to verify certificates on SSL connections.
    :param int timeout: Timeout for requests.
    :param nonce_observer: Called with each replay nonce received.
    """
    def __init__(self, user_agent: str = 'acmelite', verify_ssl: bool = True,
                 timeout: int = constants.DEFAULT_NETWORK_TIMEOUT,
                 nonce_observer: Optional[Callable[[str], None]] = None) -> None:
        self.user_agent = user_agent
        self.verify_ssl = verify_ssl
        self.nonce_observer = nonce_observer
        self._default_timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter()

        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def __enter__(self) -> 'Transport':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def exchange(self, target: messages.Target,
                 body: Optional[bytes] = None) -> messages.AuthorityResponse:
        """Send one request and buffer the whole response.

        :param .messages.Target target: Where and how to send.
        :param bytes body: Request body, typically a serialized JWS.

        :raises .TransportError: in case of connection or I/O problems.

        :returns: Response, whatever its status.
        :rtype: `.messages.AuthorityResponse`

        """
        url = target.url
        headers = {'User-Agent': self.user_agent}
        if body is not None:
            headers['Content-Type'] = constants.JOSE_CONTENT_TYPE
            logger.debug('Sending %s request to %s:\n%s',
                         target.method, url, body.decode('utf-8', 'replace'))
        else:
            logger.debug('Sending %s request to %s.', target.method, url)

        try:
            raw = self.session.request(
                target.method, url, data=body, headers=headers,
                verify=self.verify_ssl, timeout=self._default_timeout)
            # We set response.encoding so response.text knows the response is
            # UTF-8 encoded instead of trying to guess the encoding.
            raw.encoding = 'utf-8'
            text = raw.text
        except requests.exceptions.RequestException as error:
            raise errors.TransportError(url, error) from error

        logger.debug('Received response:\nHTTP %d\n%s\n\n%s',
                     raw.status_code,
                     "\n".join("{0}: {1}".format(k, v)
                               for k, v in raw.headers.items()),
                     text)
        response = messages.AuthorityResponse(
            status_code=raw.status_code, headers=raw.headers, body=text)

        nonce = response.nonce
        if nonce and self.nonce_observer is not None:
            try:
                self.nonce_observer(nonce)
            except errors.BadNonce as error:
                # the authority already acted on the request; keep its response
                logger.warning('Ignoring malformed replay nonce: %s', error)
        return response
