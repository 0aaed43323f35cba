"""acmelite user-supplied configuration."""
import argparse
import os

from acmelite import constants
from acmelite import errors
from acmelite import messages


class ClientConfig:
    """Configuration wrapper around :class:`argparse.Namespace`.

    Attributes not defined here are looked up on the namespace, so
    every flag added by `acmelite.main.create_parser` is available
    under its ``dest`` name. The following are derived:

      - `directory_target`
      - `verify_ssl`

    :ivar namespace: Namespace typically produced by
        :meth:`argparse.ArgumentParser.parse_args`.
    :type namespace: :class:`argparse.Namespace`

    """

    def __init__(self, namespace: argparse.Namespace) -> None:
        object.__setattr__(self, 'namespace', namespace)

        self.namespace.key_path = os.path.abspath(
            os.path.expanduser(self.namespace.key_path))

        # Check parameters sanity, and error out in case of problem.
        check_config_sanity(self)

    @classmethod
    def from_defaults(cls, **kwargs) -> 'ClientConfig':
        """Build a configuration from `constants.CLI_DEFAULTS` and ``kwargs``."""
        values = dict(constants.CLI_DEFAULTS)
        values.update(kwargs)
        return cls(argparse.Namespace(**values))

    def __getattr__(self, name):
        return getattr(self.namespace, name)

    def __setattr__(self, name, value):
        setattr(self.namespace, name, value)

    @property
    def directory_target(self) -> messages.Target:
        """Target probed for fresh nonces."""
        return self.target_for(constants.DIRECTORY_PATH, method='HEAD')

    @property
    def verify_ssl(self) -> bool:  # pylint: disable=missing-docstring
        return not self.namespace.no_verify_ssl

    def target_for(self, path: str, method: str = 'POST') -> messages.Target:
        """Named protocol path on the configured authority."""
        return messages.Target.for_path(
            path, host=self.namespace.server_host,
            scheme=self.namespace.scheme, method=method)


def check_config_sanity(config: ClientConfig) -> None:
    """Validate command line options and display error message if
    requirements are not met.

    :param config: ClientConfig instance holding user configuration
    :type args: :class:`acmelite.configuration.ClientConfig`

    """
    if config.scheme not in ('http', 'https'):
        raise errors.ConfigurationError(
            'Unsupported scheme {0!r}, use http or https'.format(config.scheme))
    if not config.server_host or '/' in config.server_host:
        raise errors.ConfigurationError(
            'Invalid server host {0!r}'.format(config.server_host))
    if config.rsa_key_size < 2048:
        raise errors.ConfigurationError(
            'RSA key size must be at least 2048 bits')
    if config.timeout <= 0:
        raise errors.ConfigurationError('Timeout must be positive')
