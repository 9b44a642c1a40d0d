import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    bed = DomainFixture(ordering)
    bed.setup()
    setup_db(ordering)
    yield bed
    drop_db(ordering)
    bed.teardown()


def _reset_infrastructure():
    from protean import current_domain

    from ordering.notification import reset_notifier

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_notifier()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield
        _reset_infrastructure()


@pytest.fixture()
def notifier():
    """The fake notifier every order event is delivered to during a test."""
    from ordering.notification import set_notifier
    from ordering.notification.fake_adapter import FakeNotifier

    fake = FakeNotifier()
    set_notifier(fake)
    return fake
