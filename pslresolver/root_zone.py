"""IANA Root Zone Database: the list of top level domains actually delegated."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from .domain import Domain
from .exceptions import (
    InvalidDomain,
    UnableToLoadRootZoneDatabase,
    UnableToResolveDomain,
)
from .labels import IDNA2008, IdnaOptions
from .resolved import DomainLike, ResolvedDomain, as_domain

LOG = logging.getLogger("pslresolver")

HEADER_RE = re.compile(r"^# Version (?P<version>\d+), Last Updated (?P<date>.*?)$")
LAST_UPDATED_FORMAT = "%a %b %d %H:%M:%S %Y %Z"


def parse_root_zone_database(
    text: str, idna_options: IdnaOptions = IDNA2008
) -> tuple[str, datetime, tuple[str, ...]]:
    """Parse the IANA `tlds-alpha-by-domain.txt` format.

    Returns the version, the last update time, and the lowercase ASCII TLDs.

    >>> parse_root_zone_database(
    ...     "# Version 2018082200, Last Updated Wed Aug 22 07:07:01 2018 UTC\\n"
    ...     "COM\\nXN--P1AI\\n"
    ... )[2]
    ('com', 'xn--p1ai')
    """
    lines = text.strip().splitlines()
    if not lines:
        raise UnableToLoadRootZoneDatabase.due_to_empty_content()

    header, *entries = lines
    match = HEADER_RE.match(header.strip())
    if match is None:
        raise UnableToLoadRootZoneDatabase.due_to_invalid_header(header)
    try:
        last_updated = datetime.strptime(
            match.group("date"), LAST_UPDATED_FORMAT
        ).replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise UnableToLoadRootZoneDatabase.due_to_invalid_header(header) from exc

    records = []
    for line_number, entry in enumerate(entries, start=2):
        entry = entry.strip()
        if entry.startswith("#"):
            raise UnableToLoadRootZoneDatabase.due_to_duplicate_header(line_number)
        records.append(_parse_entry(entry, line_number, idna_options))

    if not records:
        raise UnableToLoadRootZoneDatabase.due_to_empty_content()

    LOG.debug(
        "Parsed %s top level domains (version %s)", len(records), match.group("version")
    )
    return match.group("version"), last_updated, tuple(records)


def _parse_entry(entry: str, line_number: int, idna_options: IdnaOptions) -> str:
    try:
        domain = Domain.from_string(entry, idna_options)
    except InvalidDomain as exc:
        raise UnableToLoadRootZoneDatabase.due_to_invalid_entry(
            entry, line_number
        ) from exc

    if len(domain) != 1 or domain.is_ip or not domain.ascii_labels[0]:
        raise UnableToLoadRootZoneDatabase.due_to_invalid_entry(entry, line_number)
    return domain.ascii_labels[0]


class TopLevelDomains:
    """The set of top level domains in one Root Zone Database release."""

    def __init__(
        self,
        records: Iterable[str],
        version: str,
        last_updated: datetime,
        idna_options: IdnaOptions = IDNA2008,
    ) -> None:
        self._records = tuple(dict.fromkeys(records))
        self._lookup = frozenset(self._records)
        self.version = version
        self.last_updated = last_updated
        self.idna_options = idna_options

    @classmethod
    def from_string(
        cls, text: str, idna_options: IdnaOptions = IDNA2008
    ) -> TopLevelDomains:
        version, last_updated, records = parse_root_zone_database(text, idna_options)
        return cls(records, version, last_updated, idna_options)

    @classmethod
    def from_path(
        cls,
        path: str | os.PathLike[str],
        encoding: str = "utf-8",
        idna_options: IdnaOptions = IDNA2008,
    ) -> TopLevelDomains:
        try:
            with open(path, encoding=encoding) as root_zone_file:
                text = root_zone_file.read()
        except (OSError, UnicodeError) as exc:
            raise UnableToLoadRootZoneDatabase.due_to_unreadable_path(path) from exc
        return cls.from_string(text, idna_options)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], idna_options: IdnaOptions = IDNA2008
    ) -> TopLevelDomains:
        try:
            return cls(
                [_parse_entry(record, 0, idna_options) for record in data["records"]],
                str(data["version"]),
                datetime.fromisoformat(data["last_updated"]),
                idna_options,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise UnableToLoadRootZoneDatabase(
                "The serialized Root Zone Database is malformed"
            ) from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "last_updated": self.last_updated.isoformat(),
            "records": list(self._records),
        }

    @property
    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __contains__(self, tld: object) -> bool:
        """Whether a single label is a delegated top level domain.

        >>> tlds = TopLevelDomains(["com"], "1", datetime.now(timezone.utc))
        >>> "COM" in tlds, "example.com" in tlds
        (True, False)
        """
        if not isinstance(tld, (str, Domain)):
            return False
        try:
            domain = as_domain(tld, self.idna_options)
        except InvalidDomain:
            return False
        return len(domain) == 1 and domain.ascii_labels[0] in self._lookup

    def resolve(self, domain: DomainLike) -> ResolvedDomain:
        """Resolve a domain's top level domain.

        Never raises. Domains whose last label is not delegated get no
        public suffix.
        """
        try:
            parsed = as_domain(domain, self.idna_options)
        except InvalidDomain as exc:
            LOG.debug("Unable to resolve %r: %s", domain, exc)
            return ResolvedDomain.invalid(domain, exc, self.idna_options)

        if not parsed.is_resolvable:
            return ResolvedDomain.not_applicable(parsed, self.idna_options)
        if parsed.ascii_labels[-1] in self._lookup:
            return ResolvedDomain.from_iana(parsed, 1, self.idna_options)
        return ResolvedDomain.from_unknown(parsed, 0, self.idna_options)

    def get_iana_domain(self, domain: DomainLike) -> ResolvedDomain:
        """Resolve a domain's top level domain, failing if it is not delegated.

        Raises `InvalidDomain` for malformed input.
        """
        parsed = as_domain(domain, self.idna_options)
        if not parsed.is_resolvable:
            raise UnableToResolveDomain.due_to_unresolvable_domain(parsed)
        if parsed.ascii_labels[-1] not in self._lookup:
            raise UnableToResolveDomain.due_to_missing_suffix(parsed, "IANA")
        return ResolvedDomain.from_iana(parsed, 1, self.idna_options)
