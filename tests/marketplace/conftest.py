import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture()
def buyer():
    from marketplace.access.viewer import Role, Viewer

    return Viewer.of("buyer-001", Role.BUYER)


@pytest.fixture()
def seller():
    from marketplace.access.viewer import Role, Viewer

    return Viewer.of("seller-001", Role.SELLER)


@pytest.fixture()
def admin():
    from marketplace.access.viewer import Role, Viewer

    return Viewer.of("admin-001", Role.ADMIN)
