from famtime.services.providers.errors import MissingCredentialsError, RefinementTransportError
from famtime.services.providers.noop import NoopTransport
from famtime.services.providers.openai_provider import OpenAITransport
from famtime.services.providers.proxy import ProxyTransport

__all__ = [
    "MissingCredentialsError",
    "NoopTransport",
    "OpenAITransport",
    "ProxyTransport",
    "RefinementTransportError",
]
