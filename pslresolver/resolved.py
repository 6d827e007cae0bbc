"""The outcome of resolving a domain against a set of public suffixes."""

from __future__ import annotations

import enum
from typing import Any, Union

from .domain import Domain
from .exceptions import InvalidDomain, UnableToResolveDomain
from .labels import IDNA2008, IdnaOptions

DomainLike = Union[str, Domain, None]


class Section(str, enum.Enum):
    """Which Public Suffix List rules to consult."""

    ICANN = "ICANN"
    PRIVATE = "PRIVATE"
    ANY = "ANY"

    @classmethod
    def coerce(cls, value: Section | str) -> Section:
        """Accept a member or its case-insensitive name.

        >>> Section.coerce("private")
        <Section.PRIVATE: 'PRIVATE'>
        """
        try:
            return cls(value.upper() if isinstance(value, str) else value)
        except ValueError as exc:
            raise UnableToResolveDomain.due_to_invalid_section(value) from exc


class SuffixType(str, enum.Enum):
    """Where a resolved public suffix came from."""

    ICANN = "ICANN"
    PRIVATE = "PRIVATE"
    IANA = "IANA"
    UNKNOWN = "UNKNOWN"
    """No rule matched; the suffix, if any, is the implicit `*` rule's."""
    NOT_APPLICABLE = "NOT_APPLICABLE"
    """The domain cannot carry a suffix: an IP, a single label, empty labels."""
    INVALID = "INVALID"
    """The input was not a well formed domain."""


KNOWN_SUFFIX_TYPES = frozenset((SuffixType.ICANN, SuffixType.PRIVATE, SuffixType.IANA))


class ResolvedDomain:
    """A domain split into its public suffix, registrable domain, and subdomain.

    Instances are immutable. The `with_*` methods and the IDNA conversions
    return new values.

    >>> resolved = ResolvedDomain.from_icann("forums.bbc.co.uk", "co.uk")
    >>> str(resolved.public_suffix)
    'co.uk'
    >>> str(resolved.registrable_domain)
    'bbc.co.uk'
    >>> str(resolved.subdomain)
    'forums'
    """

    def __init__(
        self,
        domain: Domain,
        suffix_length: int = 0,
        suffix_type: SuffixType = SuffixType.UNKNOWN,
        error: InvalidDomain | None = None,
        raw_value: str | None = None,
    ) -> None:
        if suffix_length < 0 or suffix_length > len(domain):
            raise UnableToResolveDomain(
                f"A public suffix of {suffix_length} labels does not fit the "
                f"domain `{domain}`",
                domain,
            )
        if suffix_length and not domain.is_resolvable:
            raise UnableToResolveDomain.due_to_unresolvable_domain(domain)
        if suffix_type in KNOWN_SUFFIX_TYPES and not suffix_length:
            raise UnableToResolveDomain(
                f"A {suffix_type.value} public suffix cannot be empty", domain
            )
        if suffix_type is SuffixType.IANA and suffix_length != 1:
            raise UnableToResolveDomain(
                "An IANA public suffix is exactly one label long", domain
            )
        if (
            suffix_type in (SuffixType.NOT_APPLICABLE, SuffixType.INVALID)
            and suffix_length
        ):
            raise UnableToResolveDomain(
                f"A {suffix_type.value} result cannot have a public suffix", domain
            )

        self._domain = domain
        self._suffix_length = suffix_length
        self._suffix_type = suffix_type
        self._error = error
        self._raw_value = raw_value

    @classmethod
    def from_icann(
        cls,
        domain: DomainLike,
        suffix: int | str | Domain,
        idna_options: IdnaOptions = IDNA2008,
    ) -> ResolvedDomain:
        return cls._from_parts(domain, suffix, SuffixType.ICANN, idna_options)

    @classmethod
    def from_private(
        cls,
        domain: DomainLike,
        suffix: int | str | Domain,
        idna_options: IdnaOptions = IDNA2008,
    ) -> ResolvedDomain:
        return cls._from_parts(domain, suffix, SuffixType.PRIVATE, idna_options)

    @classmethod
    def from_iana(
        cls,
        domain: DomainLike,
        suffix: int | str | Domain = 1,
        idna_options: IdnaOptions = IDNA2008,
    ) -> ResolvedDomain:
        return cls._from_parts(domain, suffix, SuffixType.IANA, idna_options)

    @classmethod
    def from_unknown(
        cls,
        domain: DomainLike,
        suffix: int | str | Domain = 0,
        idna_options: IdnaOptions = IDNA2008,
    ) -> ResolvedDomain:
        return cls._from_parts(domain, suffix, SuffixType.UNKNOWN, idna_options)

    @classmethod
    def not_applicable(
        cls, domain: DomainLike, idna_options: IdnaOptions = IDNA2008
    ) -> ResolvedDomain:
        return cls(as_domain(domain, idna_options), 0, SuffixType.NOT_APPLICABLE)

    @classmethod
    def invalid(
        cls,
        value: object,
        error: InvalidDomain,
        idna_options: IdnaOptions = IDNA2008,
    ) -> ResolvedDomain:
        """Record a domain which could not be parsed, along with why."""
        raw_value = str(value) if value is not None else None
        return cls(
            Domain.from_string(None, idna_options),
            0,
            SuffixType.INVALID,
            error=error,
            raw_value=raw_value,
        )

    @classmethod
    def _from_parts(
        cls,
        domain: DomainLike,
        suffix: int | str | Domain,
        suffix_type: SuffixType,
        idna_options: IdnaOptions,
    ) -> ResolvedDomain:
        domain = as_domain(domain, idna_options)
        if isinstance(suffix, int):
            return cls(domain, suffix, suffix_type)

        suffix = as_domain(suffix, idna_options)
        if not len(suffix):
            return cls(domain, 0, suffix_type)
        if (
            len(suffix) > len(domain)
            or domain.ascii_labels[-len(suffix) :] != suffix.ascii_labels
        ):
            raise UnableToResolveDomain.due_to_unmatched_suffix(domain, suffix)
        return cls(domain, len(suffix), suffix_type)

    @property
    def domain(self) -> Domain:
        return self._domain

    @property
    def value(self) -> str | None:
        """The resolved domain as a string; for invalid input, that input."""
        if self._suffix_type is SuffixType.INVALID:
            return self._raw_value
        return self._domain.value

    @property
    def suffix_length(self) -> int:
        return self._suffix_length

    @property
    def suffix_type(self) -> SuffixType:
        return self._suffix_type

    @property
    def error(self) -> InvalidDomain | None:
        """Why the input was rejected, for `SuffixType.INVALID` results."""
        return self._error

    @property
    def public_suffix(self) -> Domain | None:
        if not self._suffix_length:
            return None
        return self._domain[-self._suffix_length :]

    @property
    def registrable_domain(self) -> Domain | None:
        """The public suffix plus one more label.

        Only defined when the domain is longer than its public suffix.

        >>> print(ResolvedDomain.from_icann("co.uk", 2).registrable_domain)
        None
        """
        if not self._suffix_length or len(self._domain) <= self._suffix_length:
            return None
        return self._domain[-(self._suffix_length + 1) :]

    @property
    def subdomain(self) -> Domain | None:
        boundary = len(self._domain) - self._suffix_length - 1
        if self.registrable_domain is None or boundary < 1:
            return None
        return self._domain[:boundary]

    @property
    def second_level_domain(self) -> str | None:
        """The label directly left of the public suffix."""
        if self.registrable_domain is None:
            return None
        return self._domain[-(self._suffix_length + 1)]

    @property
    def is_known(self) -> bool:
        return self._suffix_type in KNOWN_SUFFIX_TYPES

    @property
    def is_icann(self) -> bool:
        return self._suffix_type is SuffixType.ICANN

    @property
    def is_private(self) -> bool:
        return self._suffix_type is SuffixType.PRIVATE

    @property
    def is_iana(self) -> bool:
        return self._suffix_type is SuffixType.IANA

    @property
    def is_valid(self) -> bool:
        return self._suffix_type is not SuffixType.INVALID

    def with_public_suffix(
        self,
        suffix: str | Domain | None,
        suffix_type: SuffixType = SuffixType.UNKNOWN,
    ) -> ResolvedDomain:
        """Replace the public suffix, keeping every label left of it.

        The new suffix is rendered in the same script, ASCII or Unicode, as
        the domain it is attached to.

        >>> resolved = ResolvedDomain.from_icann("www.example.com", 1)
        >>> str(resolved.with_public_suffix("co.uk", SuffixType.ICANN).registrable_domain)
        'example.co.uk'
        """
        head_length = len(self._domain) - self._suffix_length
        if (
            self._domain.is_ip
            or head_length < 1
            or not all(self._domain.ascii_labels[:head_length])
        ):
            raise UnableToResolveDomain(
                f"The domain `{self._domain}` has no labels left of its public "
                "suffix to attach a new one to",
                self._domain,
            )

        head = self._domain[:head_length]
        if suffix is None:
            return ResolvedDomain(head, 0, suffix_type)

        suffix = as_domain(suffix, self._domain.idna_options)
        if not len(suffix) or not all(suffix.ascii_labels) or suffix.is_ip:
            raise InvalidDomain(
                f"`{suffix}` is not a valid public suffix", domain=suffix.value
            )
        suffix = self._in_domain_script(suffix)
        return ResolvedDomain(head.join(suffix), len(suffix), suffix_type)

    def with_subdomain(self, subdomain: str | Domain | None) -> ResolvedDomain:
        """Replace the subdomain; `None` removes it.

        >>> resolved = ResolvedDomain.from_icann("www.example.com", 1)
        >>> resolved.with_subdomain("shop").value
        'shop.example.com'
        >>> resolved.with_subdomain(None).value
        'example.com'
        """
        registrable_domain = self.registrable_domain
        if registrable_domain is None:
            raise UnableToResolveDomain.due_to_missing_registrable_domain(self._domain)

        if subdomain is None:
            return ResolvedDomain(
                registrable_domain, self._suffix_length, self._suffix_type
            )

        subdomain = as_domain(subdomain, self._domain.idna_options)
        if not len(subdomain) or not all(subdomain.ascii_labels) or subdomain.is_ip:
            raise InvalidDomain(
                f"`{subdomain}` is not a valid subdomain", domain=subdomain.value
            )
        return ResolvedDomain(
            self._in_domain_script(subdomain).join(registrable_domain),
            self._suffix_length,
            self._suffix_type,
        )

    def to_ascii(self) -> ResolvedDomain:
        if not self.is_valid:
            return self
        return ResolvedDomain(
            self._domain.to_ascii(), self._suffix_length, self._suffix_type
        )

    def to_unicode(self) -> ResolvedDomain:
        if not self.is_valid:
            return self
        return ResolvedDomain(
            self._domain.to_unicode(), self._suffix_length, self._suffix_type
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible primitives."""

        def as_str(domain: Domain | None) -> str | None:
            return None if domain is None else str(domain)

        return {
            "domain": self.value,
            "public_suffix": as_str(self.public_suffix),
            "registrable_domain": as_str(self.registrable_domain),
            "subdomain": as_str(self.subdomain),
            "suffix_type": self._suffix_type.value,
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], idna_options: IdnaOptions = IDNA2008
    ) -> ResolvedDomain:
        """Rebuild a value produced by `to_dict`.

        Raises `UnableToResolveDomain` when the stored public suffix does not
        end the stored domain.
        """
        suffix_type = SuffixType(data.get("suffix_type", SuffixType.UNKNOWN))
        value = data.get("domain")
        if suffix_type is SuffixType.INVALID:
            try:
                Domain.from_string(value, idna_options)
            except InvalidDomain as exc:
                return cls.invalid(value, exc, idna_options)
            raise UnableToResolveDomain(
                f"The domain `{value}` was stored as invalid but parses", value
            )
        if suffix_type is SuffixType.NOT_APPLICABLE:
            return cls.not_applicable(value, idna_options)
        return cls._from_parts(
            value, data.get("public_suffix") or 0, suffix_type, idna_options
        )

    def _in_domain_script(self, domain: Domain) -> Domain:
        if self._domain.is_ascii:
            return domain.to_ascii()
        return domain.to_unicode()

    def _key(self) -> tuple[Any, ...]:
        return (
            self._domain,
            self._suffix_length,
            self._suffix_type,
            self._raw_value,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedDomain):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        public_suffix = self.public_suffix
        return (
            f"{self.__class__.__name__}(domain={self.value!r}, "
            f"public_suffix={public_suffix and str(public_suffix)!r}, "
            f"suffix_type={self._suffix_type.value!r})"
        )


def as_domain(domain: DomainLike, idna_options: IdnaOptions = IDNA2008) -> Domain:
    """Coerce a string, `None`, or a `Domain` into a `Domain` under the given options."""
    if isinstance(domain, Domain):
        if domain.idna_options == idna_options:
            return domain
        domain = domain.value
    return Domain.from_string(domain, idna_options)
