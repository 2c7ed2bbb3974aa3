"""
Integration test fixtures and configuration.

Integration tests drive lambda_handler with proxy events against moto S3
and a recording fake email provider.
"""

import pytest

from relay.shared.config import get_settings


@pytest.fixture
def relay_environment(mock_s3, fake_provider, monkeypatch):
    """
    Wire the handler's default service construction to the fakes.

    S3 is intercepted by moto; the provider client gets the fake transport.
    """
    from lambdas.upload_relay import relay_service
    from relay.shared.tools.email import EmailProviderClient

    get_settings.cache_clear()

    monkeypatch.setattr(
        relay_service,
        "EmailProviderClient",
        lambda settings: EmailProviderClient(settings, transport=fake_provider.transport),
    )

    yield {"s3": mock_s3, "provider": fake_provider}

    get_settings.cache_clear()
