"""acmelite constants."""
import logging

DEFAULT_SERVER_HOST = 'acme-staging.api.letsencrypt.org'
"""Authority host used for named protocol paths."""

DEFAULT_SCHEME = 'https'

DIRECTORY_PATH = '/directory'
"""Path probed with ``HEAD`` for a fresh replay nonce."""

NEW_REG_PATH = '/acme/new-reg'
NEW_AUTHZ_PATH = '/acme/new-authz'

REPLAY_NONCE_HEADER = 'Replay-Nonce'
JOSE_CONTENT_TYPE = 'application/jose+json'

TERMS_OF_SERVICE_REL = 'terms-of-service'

DEFAULT_NETWORK_TIMEOUT = 45

RSA_PUBLIC_EXPONENT = 65537

CLI_DEFAULTS = dict(
    server_host=DEFAULT_SERVER_HOST,
    scheme=DEFAULT_SCHEME,
    key_path='letsencrypt.key',
    rsa_key_size=2048,
    user_agent='acmelite',
    timeout=DEFAULT_NETWORK_TIMEOUT,
    no_verify_ssl=False,
    quiet=False,
    verbose_count=-int(logging.INFO / 10),
)
"""Defaults for CLI flags and `.ClientConfig` attributes."""

QUIET_LOGGING_LEVEL = logging.WARNING
"""Logging level to use in quiet mode."""

ENV_VAR_PREFIX = 'ACMELITE_'
