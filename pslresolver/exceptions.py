"""Errors raised by pslresolver."""

from __future__ import annotations

from typing import Any


class PslResolverError(Exception):
    """Base class for every error raised by this library."""


class InvalidDomain(PslResolverError, ValueError):
    """The input cannot be a syntactically valid domain name.

    Raised for empty or oversized labels, disallowed characters, and IDNA
    conversion failures.
    """

    def __init__(self, message: str, domain: str | None = None) -> None:
        super().__init__(message)
        self.domain = domain

    @classmethod
    def due_to_invalid_label(cls, label: str, reason: Any = None) -> InvalidDomain:
        """Build the error for a label which failed normalization."""
        message = f"The label `{label}` is invalid"
        if reason:
            message = f"{message}: {reason}"
        return cls(message, domain=label)

    @classmethod
    def due_to_domain_too_long(cls, domain: str) -> InvalidDomain:
        """Build the error for a domain over 253 octets once converted to ASCII."""
        return cls(
            f"The domain `{domain}` is longer than 253 octets in its ASCII form",
            domain=domain,
        )


class UnableToResolveDomain(PslResolverError, ValueError):
    """The domain is well formed, but cannot be resolved the way the caller asked."""

    def __init__(self, message: str, domain: object = None) -> None:
        super().__init__(message)
        self.domain = domain

    @classmethod
    def due_to_unresolvable_domain(cls, domain: object) -> UnableToResolveDomain:
        return cls(f"The domain `{domain}` cannot contain a public suffix", domain)

    @classmethod
    def due_to_missing_suffix(
        cls, domain: object, section: object
    ) -> UnableToResolveDomain:
        return cls(
            f"The domain `{domain}` does not contain a public suffix from the "
            f"{section} section",
            domain,
        )

    @classmethod
    def due_to_missing_registrable_domain(cls, domain: object) -> UnableToResolveDomain:
        return cls(f"The domain `{domain}` does not have a registrable domain", domain)

    @classmethod
    def due_to_unmatched_suffix(
        cls, domain: object, suffix: object
    ) -> UnableToResolveDomain:
        return cls(
            f"The public suffix `{suffix}` is not a suffix of the domain `{domain}`",
            domain,
        )

    @classmethod
    def due_to_invalid_section(cls, section: object) -> UnableToResolveDomain:
        return cls(
            f"`{section}` is not a known section; use one of ICANN, PRIVATE or ANY"
        )


class UnableToLoadRules(PslResolverError, LookupError):
    """Public Suffix List text was found but could not be turned into rules."""

    @classmethod
    def due_to_invalid_rule(cls, rule: str, line_number: int) -> UnableToLoadRules:
        return cls(f"The rule `{rule}` on line {line_number} is not a valid suffix")

    @classmethod
    def due_to_invalid_tree(cls, section: str) -> UnableToLoadRules:
        return cls(f"The serialized rule tree for {section} is malformed")

    @classmethod
    def due_to_unreadable_path(cls, path: object) -> UnableToLoadRules:
        return cls(f"Unable to read the Public Suffix List at `{path}`")


class UnableToLoadRootZoneDatabase(PslResolverError, LookupError):
    """IANA Root Zone Database text was found but does not follow its format."""

    @classmethod
    def due_to_empty_content(cls) -> UnableToLoadRootZoneDatabase:
        return cls("The Root Zone Database is empty")

    @classmethod
    def due_to_invalid_header(cls, line: str) -> UnableToLoadRootZoneDatabase:
        return cls(f"The Root Zone Database header `{line}` is invalid or missing")

    @classmethod
    def due_to_duplicate_header(cls, line_number: int) -> UnableToLoadRootZoneDatabase:
        return cls(f"Unexpected extra header on line {line_number}")

    @classmethod
    def due_to_invalid_entry(
        cls, entry: str, line_number: int
    ) -> UnableToLoadRootZoneDatabase:
        return cls(
            f"The entry `{entry}` on line {line_number} is not a valid top level domain"
        )

    @classmethod
    def due_to_unreadable_path(cls, path: object) -> UnableToLoadRootZoneDatabase:
        return cls(f"Unable to read the Root Zone Database at `{path}`")
