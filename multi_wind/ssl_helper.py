"""
SSL Helper for the httpx fetch client

Builds the ssl.SSLContext handed to httpx. The CA bundle comes from:

1. MULTI_WIND_CA_BUNDLE environment variable (explicit override, e.g. a
   corporate inspection CA)
2. certifi CA bundle (standard Mozilla CA bundle)
"""

import logging
import os
import ssl

import certifi

logger = logging.getLogger(__name__)


def get_ca_bundle() -> str:
    """
    Get the path of the CA bundle used to verify provider certificates.

    Returns:
        Path to a PEM bundle
    """
    env_bundle = os.getenv("MULTI_WIND_CA_BUNDLE")
    if env_bundle:
        if os.path.exists(env_bundle):
            logger.info(f"[ssl_helper] Using CA bundle from env: {env_bundle}")
            return env_bundle
        logger.warning(f"[ssl_helper] MULTI_WIND_CA_BUNDLE path not found: {env_bundle}")

    return certifi.where()


def get_httpx_ssl_context() -> ssl.SSLContext:
    """
    Get an ssl.SSLContext for httpx with the CA bundle loaded.

    Verification always stays on; a missing override falls back to certifi.

    Returns:
        ssl.SSLContext configured for HTTPS with proper CA certs.
    """
    return ssl.create_default_context(cafile=get_ca_bundle())
