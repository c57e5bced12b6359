import pytest


@pytest.fixture(autouse=True)
def use_stub_gateway_for_tests(settings):
    settings.USE_STRIPE_GATEWAY = False


@pytest.fixture(autouse=True)
def reset_throttles():
    # Throttle counters live in the default (locmem) cache
    from django.core.cache import cache
    cache.clear()
    yield
