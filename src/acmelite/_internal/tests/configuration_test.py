"""Tests for acmelite.configuration."""
import os
import sys
import unittest

import pytest

from acmelite import errors


class ClientConfigTest(unittest.TestCase):
    """Tests for acmelite.configuration.ClientConfig."""

    def _config(self, **kwargs):
        from acmelite.configuration import ClientConfig
        return ClientConfig.from_defaults(**kwargs)

    def test_defaults(self):
        config = self._config()
        assert config.target_for('/').url == 'https://acme-staging.api.letsencrypt.org/'
        assert config.verify_ssl
        assert config.rsa_key_size == 2048
        assert config.key_path == os.path.abspath('letsencrypt.key')

    def test_key_path_expanded(self):
        config = self._config(key_path='~/account.key')
        assert config.key_path == os.path.join(os.path.expanduser('~'), 'account.key')

    def test_directory_target(self):
        target = self._config(server_host='localhost:4000', scheme='http').directory_target
        assert target.url == 'http://localhost:4000/directory'
        assert target.method == 'HEAD'

    def test_target_for(self):
        target = self._config().target_for('/acme/new-reg')
        assert target.url == 'https://acme-staging.api.letsencrypt.org/acme/new-reg'
        assert target.method == 'POST'

    def test_no_verify_ssl(self):
        assert not self._config(no_verify_ssl=True).verify_ssl

    def test_attribute_delegation(self):
        config = self._config(hostname='example.com')
        assert config.hostname == 'example.com'
        config.hostname = 'example.org'
        assert config.namespace.hostname == 'example.org'

    def test_bad_scheme(self):
        with pytest.raises(errors.ConfigurationError):
            self._config(scheme='ftp')

    def test_bad_host(self):
        with pytest.raises(errors.ConfigurationError):
            self._config(server_host='')
        with pytest.raises(errors.ConfigurationError):
            self._config(server_host='example.com/acme')

    def test_small_key(self):
        with pytest.raises(errors.ConfigurationError):
            self._config(rsa_key_size=1024)

    def test_bad_timeout(self):
        with pytest.raises(errors.ConfigurationError):
            self._config(timeout=0)


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
