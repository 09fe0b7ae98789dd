"""
Resolution of user identifiers to login names.

The lookup service is slow and easily overloaded, so identifiers are resolved
strictly one after the other: a lookup is only started once the previous one
has returned.
"""

import logging
from collections.abc import Iterable

from storage_report.config import SPECIAL_IDENTIFIERS, LookupConfig
from storage_report.core.utils import run_command
from storage_report.traces import trace_decorator, using_trace

logger = logging.getLogger(__name__)

LOGIN_KEY = "login"


class IdentityLookupError(Exception):
    """Exception raised when the lookup of an identifier fails or is ambiguous."""


def parse_logins(output: str) -> list[str]:
    """Extract the values of the `login: ...` lines of a lookup output."""
    logins = []
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip() == LOGIN_KEY:
            logins.append(value.strip())
    return logins


class IdentityResolver:
    def __init__(
        self,
        lookup: LookupConfig | None = None,
        special_identifiers: Iterable[str] = SPECIAL_IDENTIFIERS,
        enabled: bool = True,
    ):
        self.lookup = lookup if lookup is not None else LookupConfig()
        self.special_identifiers = frozenset(special_identifiers)
        self.enabled = enabled
        self.nb_lookups = 0

    def is_special(self, identifier: str) -> bool:
        return identifier in self.special_identifiers

    def lookup_login(self, identifier: str) -> str | None:
        """
        Look up the login of `identifier`.

        Returns None if the identifier is unknown, raises IdentityLookupError
        if the lookup fails or finds several logins.
        """
        command = self.lookup.format(identifier)
        logger.debug("%s $ %s", self.lookup.host, command)
        self.nb_lookups += 1
        try:
            result = run_command(self.lookup, command)
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise IdentityLookupError(f"could not run '{command}': {err}") from err

        if not result.ok:
            raise IdentityLookupError(f"'{command}' {result.describe()}")

        logins = parse_logins(result.stdout)
        if len(logins) > 1:
            raise IdentityLookupError(
                f"found {len(logins)} logins: {', '.join(logins)}"
            )
        return logins[0] if logins else None

    @trace_decorator()
    def resolve(self, identifiers: Iterable[str]) -> dict[str, str]:
        """Map each resolvable identifier to its login, in input order."""
        identities: dict[str, str] = {}
        if not self.enabled:
            return identities

        for identifier in identifiers:
            if self.is_special(identifier):
                continue

            with using_trace(
                __name__,
                "IdentityResolver.lookup_login",
                exception_types=(IdentityLookupError,),
                attributes={"identifier": identifier},
            ) as span:
                try:
                    login = self.lookup_login(identifier)
                except IdentityLookupError as err:
                    logger.warning("Could not resolve user %s: %s", identifier, err)
                    raise

                if login is None:
                    span.add_event("no match")
                else:
                    identities[identifier] = login

        return identities
