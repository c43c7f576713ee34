"""
Default resolve function backed by dnspython.

Queries A/AAAA records and keeps the record TTL, which the system
getaddrinfo() call does not expose.
"""
import logging
from typing import Optional

import dns.asyncresolver
import dns.resolver

from .types import RawAddress, ResolveFunction

logger = logging.getLogger(__name__)

_RECORD_TYPES = {4: "A", 6: "AAAA"}

# Answers that mean "no addresses" rather than a failed lookup
_EMPTY_ANSWER_ERRORS = (
    dns.resolver.NXDOMAIN,
    dns.resolver.NoAnswer,
)


def create_dnspython_resolve_function(
    timeout_seconds: float = 5.0,
    nameservers: Optional[list[str]] = None,
) -> ResolveFunction:
    """
    Create an async resolve function using dnspython.

    Args:
        timeout_seconds: Lifetime of a single query.
        nameservers: Nameservers to query instead of the system ones.

    Returns:
        Async function: (hostname, ip_version) -> list[RawAddress]
    """
    resolver = dns.asyncresolver.Resolver()
    resolver.lifetime = timeout_seconds
    if nameservers:
        resolver.nameservers = list(nameservers)

    async def resolve(hostname: str, ip_version: int) -> list[RawAddress]:
        record_type = _RECORD_TYPES.get(ip_version)
        if record_type is None:
            raise ValueError(f"Unsupported ip version: {ip_version}")

        try:
            answer = await resolver.resolve(hostname, record_type)
        except _EMPTY_ANSWER_ERRORS as e:
            logger.debug(f"resolve: No {record_type} records for '{hostname}' ({type(e).__name__})")
            return []

        ttl = answer.rrset.ttl if answer.rrset is not None else 0
        addresses = [RawAddress(address=str(record.address), ttl=ttl) for record in answer]
        logger.debug(
            f"resolve: '{hostname}' {record_type} -> {len(addresses)} address(es), ttl={ttl}"
        )
        return addresses

    return resolve
