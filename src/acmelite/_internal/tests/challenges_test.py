"""Tests for acmelite.challenges."""
import sys
import unittest

import pytest


class ChallengeTest(unittest.TestCase):

    def test_from_json_unrecognized(self):
        from acmelite.challenges import Challenge
        from acmelite.challenges import UnrecognizedChallenge
        chall = UnrecognizedChallenge({"type": "foo"})
        assert chall == Challenge.from_json(chall.jobj)
        assert chall.typ == 'foo'
        assert chall.to_partial_json() == {"type": "foo"}

    def test_from_json_malformed(self):
        from acmelite.challenges import Challenge
        from acmelite.challenges import UnrecognizedChallenge
        chall = Challenge.from_json({"type": "dns-01"})
        assert isinstance(chall, UnrecognizedChallenge)
        assert chall.typ == 'dns-01'
        assert chall.jobj == {"type": "dns-01"}


class HTTP01Test(unittest.TestCase):

    def setUp(self):
        from acmelite.challenges import HTTP01
        self.msg = HTTP01(token='evaGxfADs6pSRb2LAv9IZf17Dt3juxGJ-PCt92wr-oA')
        self.jmsg = {
            'type': 'http-01',
            'token': 'evaGxfADs6pSRb2LAv9IZf17Dt3juxGJ-PCt92wr-oA',
        }

    def test_path(self):
        assert self.msg.path == '/.well-known/acme-challenge/' \
                                'evaGxfADs6pSRb2LAv9IZf17Dt3juxGJ-PCt92wr-oA'

    def test_uri(self):
        assert 'http://example.com/.well-known/acme-challenge/' \
               'evaGxfADs6pSRb2LAv9IZf17Dt3juxGJ-PCt92wr-oA' == \
               self.msg.uri('example.com')

    def test_to_partial_json(self):
        assert self.jmsg == self.msg.to_partial_json()

    def test_from_json(self):
        from acmelite.challenges import Challenge
        from acmelite.challenges import HTTP01
        chall = Challenge.from_json(self.jmsg)
        assert isinstance(chall, HTTP01)
        assert chall == self.msg


class DNS01Test(unittest.TestCase):

    def test_validation_domain_name(self):
        from acmelite.challenges import DNS01
        assert DNS01(token='abc').validation_domain_name('www.example.com') == \
            '_acme-challenge.www.example.com'


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
