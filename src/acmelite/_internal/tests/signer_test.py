"""Tests for acmelite.signer."""
import json
import sys
import unittest
from unittest import mock

import josepy as jose
import pytest

from acmelite import errors
from acmelite import messages
from acmelite._internal.tests import test_util


class CanonicalJSONTest(unittest.TestCase):
    """Tests for acmelite.signer.canonical_json."""

    def test_sorted_compact(self):
        from acmelite.signer import canonical_json
        assert canonical_json({'resource': 'new-reg', 'agreement': 'tos'}) == \
            b'{"agreement":"tos","resource":"new-reg"}'

    def test_stable(self):
        from acmelite.signer import canonical_json
        assert canonical_json({'b': 1, 'a': [1, 2]}) == canonical_json({'a': [1, 2], 'b': 1})

    def test_unicode(self):
        from acmelite.signer import canonical_json
        assert canonical_json({'value': 'b\xfccher.example'}) == \
            '{"value":"b\xfccher.example"}'.encode('utf-8')

    def test_jose_object(self):
        from acmelite.signer import canonical_json
        assert canonical_json(messages.NewRegistration()) == b'{"resource":"new-reg"}'

    def test_not_serializable(self):
        from acmelite.signer import canonical_json
        with pytest.raises(errors.SerializationError):
            canonical_json({'when': object()})


class RequestSignerTest(unittest.TestCase):
    """Tests for acmelite.signer.RequestSigner."""

    def setUp(self):
        from acmelite.signer import RequestSigner
        self.key = test_util.account_key()
        self.keys = mock.MagicMock()
        self.keys.get_key.return_value = self.key
        self.nonces = mock.MagicMock()
        self.nonces.get_nonce.return_value = test_util.nonce(b'nonce')
        self.signer = RequestSigner(self.keys, self.nonces)

    def test_sign(self):
        envelope = self.signer.sign({'resource': 'new-reg'})

        assert envelope.verify(self.key.public_key())
        assert envelope.nonce == b'nonce'
        assert envelope.payload == b'{"resource":"new-reg"}'
        protected = json.loads(envelope.signature.protected)
        assert protected['alg'] == 'RS256'
        assert protected['nonce'] == test_util.nonce(b'nonce')
        assert jose.JWK.from_json(protected['jwk']) == self.key.public_key()

    def test_sign_jose_object(self):
        envelope = self.signer.sign(messages.UpdateRegistration(agreement='tos'))
        assert json.loads(envelope.payload) == {'resource': 'reg', 'agreement': 'tos'}

    def test_one_nonce_per_envelope(self):
        self.nonces.get_nonce.side_effect = [
            test_util.nonce(b'one'), test_util.nonce(b'two')]
        first = self.signer.sign({'resource': 'new-reg'})
        second = self.signer.sign({'resource': 'new-reg'})
        assert first.nonce == b'one'
        assert second.nonce == b'two'

    def test_nonce_failure(self):
        cause = errors.NonceUnavailableError({})
        self.nonces.get_nonce.side_effect = cause
        with pytest.raises(errors.SigningError) as excinfo:
            self.signer.sign({'resource': 'new-reg'})
        assert excinfo.value.cause is cause

    def test_key_failure(self):
        cause = errors.KeyStorageError('corrupt')
        self.keys.get_key.side_effect = cause
        with pytest.raises(errors.SigningError) as excinfo:
            self.signer.sign({'resource': 'new-reg'})
        assert excinfo.value.cause is cause

    def test_serialization_failure_consumes_no_nonce(self):
        with pytest.raises(errors.SerializationError):
            self.signer.sign({'when': object()})
        self.nonces.get_nonce.assert_not_called()
        self.keys.get_key.assert_not_called()

    def test_wrong_key_type(self):
        self.keys.get_key.return_value = jose.JWKOct(key=b'secret')
        with pytest.raises(errors.SigningError):
            self.signer.sign({'resource': 'new-reg'})


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
