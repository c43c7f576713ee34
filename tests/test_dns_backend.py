"""
Tests for dns_backend.py
Logic testing: Happy Path, Error Path, Path coverage
"""
import dns.exception
import dns.resolver
import pytest

from resolve_cache import dns_backend
from resolve_cache.dns_backend import create_dnspython_resolve_function
from resolve_cache.types import RawAddress


class _Record:
    def __init__(self, address: str) -> None:
        self.address = address


class _RRset:
    def __init__(self, ttl: int) -> None:
        self.ttl = ttl


class _Answer:
    def __init__(self, addresses, ttl: int) -> None:
        self._records = [_Record(a) for a in addresses]
        self.rrset = _RRset(ttl)

    def __iter__(self):
        return iter(self._records)


class _FakeResolver:
    """Stand-in for dns.asyncresolver.Resolver"""

    instances: list["_FakeResolver"] = []
    outcomes: dict = {}

    def __init__(self) -> None:
        self.lifetime = None
        self.nameservers = ["192.0.2.53"]
        self.queries = []
        _FakeResolver.instances.append(self)

    async def resolve(self, hostname: str, record_type: str):
        self.queries.append((hostname, record_type))
        outcome = _FakeResolver.outcomes[record_type]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_resolver(monkeypatch):
    _FakeResolver.instances = []
    _FakeResolver.outcomes = {}
    monkeypatch.setattr(dns_backend.dns.asyncresolver, "Resolver", _FakeResolver)
    return _FakeResolver


class TestCreateResolveFunction:
    """Tests for create_dnspython_resolve_function"""

    # Path: resolver configured from arguments
    def test_configures_resolver(self, fake_resolver):
        create_dnspython_resolve_function(timeout_seconds=2.5, nameservers=["9.9.9.9"])

        resolver = fake_resolver.instances[0]
        assert resolver.lifetime == 2.5
        assert resolver.nameservers == ["9.9.9.9"]

    # Path: system nameservers kept by default
    def test_default_nameservers(self, fake_resolver):
        create_dnspython_resolve_function()
        assert fake_resolver.instances[0].nameservers == ["192.0.2.53"]


class TestResolve:
    """Tests for the returned resolve function"""

    # Happy Path: A records with ttl
    @pytest.mark.asyncio
    async def test_ipv4(self, fake_resolver):
        fake_resolver.outcomes["A"] = _Answer(["192.0.2.1", "192.0.2.2"], ttl=120)
        resolve = create_dnspython_resolve_function()

        result = await resolve("api.example.com", 4)

        assert result == [
            RawAddress(address="192.0.2.1", ttl=120),
            RawAddress(address="192.0.2.2", ttl=120),
        ]
        assert fake_resolver.instances[0].queries == [("api.example.com", "A")]

    # Happy Path: AAAA records
    @pytest.mark.asyncio
    async def test_ipv6(self, fake_resolver):
        fake_resolver.outcomes["AAAA"] = _Answer(["2001:db8::1"], ttl=30)
        resolve = create_dnspython_resolve_function()

        result = await resolve("api.example.com", 6)

        assert result == [RawAddress(address="2001:db8::1", ttl=30)]
        assert fake_resolver.instances[0].queries == [("api.example.com", "AAAA")]

    # Path: NXDOMAIN / NoAnswer mean no addresses
    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [dns.resolver.NXDOMAIN(), dns.resolver.NoAnswer()])
    async def test_empty_answers(self, fake_resolver, error):
        fake_resolver.outcomes["A"] = error
        resolve = create_dnspython_resolve_function()

        assert await resolve("missing.example.com", 4) == []

    # Error Path: timeouts propagate
    @pytest.mark.asyncio
    async def test_timeout_propagates(self, fake_resolver):
        fake_resolver.outcomes["A"] = dns.exception.Timeout()
        resolve = create_dnspython_resolve_function()

        with pytest.raises(dns.exception.Timeout):
            await resolve("slow.example.com", 4)

    # Error Path: unsupported ip version
    @pytest.mark.asyncio
    async def test_unsupported_version(self, fake_resolver):
        resolve = create_dnspython_resolve_function()

        with pytest.raises(ValueError):
            await resolve("api.example.com", 5)
