"""Minimal client for the ACME v1 registration/authorization handshake.

This package signs requests with a long-lived account key, keeps track
of the authority's single-use replay nonces, registers the account and
requests a new authorization for a hostname.

"""

__version__ = '0.1.0'
