"""Outbound TLS profile for every call toward the Riot services.

The auth and storefront hosts fingerprint clients by handshake and header
shape, so all traffic goes through the same pinned configuration.
"""

from __future__ import annotations

import ssl

import certifi
import httpx

USER_AGENT = "RiotClient/43.0.1.4195386.4190634 rso-auth (Windows; 10;;Professional, x64)"

# TLS 1.2 suites, in preference order (OpenSSL names)
TLS12_CIPHERS = (
    "ECDHE-ECDSA-CHACHA20-POLY1305",
    "ECDHE-RSA-CHACHA20-POLY1305",
    "ECDHE-ECDSA-AES128-GCM-SHA256",
    "ECDHE-RSA-AES128-GCM-SHA256",
    "ECDHE-ECDSA-AES256-GCM-SHA384",
    "ECDHE-RSA-AES256-GCM-SHA384",
)

# TLS 1.3 suites are not selectable through set_ciphers(); OpenSSL enables these by default
TLS13_CIPHERS = (
    "TLS_CHACHA20_POLY1305_SHA256",
    "TLS_AES_128_GCM_SHA256",
    "TLS_AES_256_GCM_SHA384",
)

DEFAULT_TIMEOUT = 30.0


def build_ssl_context() -> ssl.SSLContext:
    """Build the pinned SSL context: TLS 1.2+, allow-listed suites, fixed order."""
    context = ssl.create_default_context(cafile=certifi.where())
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.set_ciphers(":".join(TLS12_CIPHERS))
    context.options |= ssl.OP_CIPHER_SERVER_PREFERENCE
    return context


def build_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.Client:
    """Create an httpx client carrying the TLS profile and client identity."""
    return httpx.Client(
        verify=build_ssl_context(),
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
    )
