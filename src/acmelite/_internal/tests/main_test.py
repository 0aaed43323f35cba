"""Tests for acmelite.main."""
import io
import json
import os
import sys
import unittest
from unittest import mock

import pytest

from acmelite import errors
from acmelite import messages


class CreateParserTest(unittest.TestCase):
    """Tests for acmelite.main.create_parser."""

    def _parse(self, args):
        from acmelite.main import create_parser
        return create_parser().parse_args(args)

    def test_defaults(self):
        args = self._parse(['example.com'])
        assert args.hostname == 'example.com'
        assert args.server_host == 'acme-staging.api.letsencrypt.org'
        assert args.scheme == 'https'
        assert args.key_path == 'letsencrypt.key'
        assert args.rsa_key_size == 2048
        assert args.verbose_count == -2
        assert not args.quiet
        assert not args.no_verify_ssl

    def test_flags(self):
        args = self._parse([
            '-vv', '--server-host', 'localhost:4000', '--scheme', 'http',
            '--key-path', '/tmp/account.key', '--rsa-key-size', '4096',
            '--timeout', '5', '--no-verify-ssl', 'example.org'])
        assert args.verbose_count == 0
        assert args.server_host == 'localhost:4000'
        assert args.scheme == 'http'
        assert args.key_path == '/tmp/account.key'
        assert args.rsa_key_size == 4096
        assert args.timeout == 5
        assert args.no_verify_ssl
        assert args.hostname == 'example.org'

    def test_env_var(self):
        with mock.patch.dict(os.environ, {'ACMELITE_SERVER_HOST': 'localhost'}):
            assert self._parse(['example.com']).server_host == 'localhost'

    def test_bad_scheme(self):
        with pytest.raises(SystemExit):
            self._parse(['--scheme', 'ftp', 'example.com'])

    def test_missing_hostname(self):
        with pytest.raises(SystemExit):
            self._parse([])


class MainTest(unittest.TestCase):
    """Tests for acmelite.main.main."""

    def setUp(self):
        self.patchers = [
            mock.patch('acmelite.main.ProtocolClient'),
            mock.patch('acmelite.log.setup_logging'),
        ]
        self.mock_client_cls, self.mock_setup_logging = [
            patcher.start() for patcher in self.patchers]
        self.client = self.mock_client_cls.from_config.return_value

    def tearDown(self):
        for patcher in self.patchers:
            patcher.stop()

    def _main(self, args):
        from acmelite.main import main
        return main(args)

    def test_success(self):
        from acmelite.challenges import HTTP01
        challb = messages.ChallengeBody(
            chall=HTTP01(token='abc'), uri='https://example.com/chall/1',
            status='pending')
        self.client.new_authorization.return_value = challb

        with mock.patch('sys.stdout', new_callable=io.StringIO) as stdout:
            assert self._main(['example.com']) is None

        self.client.register.assert_called_once_with()
        self.client.new_authorization.assert_called_once_with('example.com')
        self.client.close.assert_called_once_with()
        assert json.loads(stdout.getvalue()) == {
            'type': 'http-01', 'token': 'abc', 'status': 'pending',
            'uri': 'https://example.com/chall/1'}
        config = self.mock_client_cls.from_config.call_args[0][0]
        assert config.hostname == 'example.com'
        self.mock_setup_logging.assert_called_once_with(config)

    def test_registration_failure(self):
        self.client.register.side_effect = errors.RegistrationError(500, 'boom')

        result = self._main(['example.com'])

        assert result == 'Failed to register account (HTTP 500): boom'
        self.client.new_authorization.assert_not_called()
        self.client.close.assert_called_once_with()

    def test_challenge_not_found(self):
        self.client.new_authorization.side_effect = errors.ChallengeNotFoundError(
            'example.com', 'http-01', ['dns-01'])
        assert 'No http-01 challenge' in self._main(['example.com'])
        self.client.close.assert_called_once_with()

    def test_unexpected_error_propagates(self):
        self.client.register.side_effect = RuntimeError('bug')
        with pytest.raises(RuntimeError):
            self._main(['example.com'])
        self.client.close.assert_called_once_with()

    def test_configuration_error(self):
        result = self._main(['--rsa-key-size', '1024', 'example.com'])
        assert 'RSA key size' in result
        self.mock_client_cls.from_config.assert_not_called()
        self.mock_setup_logging.assert_not_called()


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
