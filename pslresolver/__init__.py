"""Export pslresolver's public interface."""

from . import _version
from .domain import Domain
from .exceptions import (
    InvalidDomain,
    PslResolverError,
    UnableToLoadRootZoneDatabase,
    UnableToLoadRules,
    UnableToResolveDomain,
)
from .labels import IDNA2003, IDNA2008, IdnaMode, IdnaOptions
from .pslresolver import Rules, SuffixResolver, Trie
from .resolved import ResolvedDomain, Section, SuffixType
from .root_zone import TopLevelDomains
from .suffix_list import Rule, RuleKind

__version__: str = _version.version

__all__ = [
    "__version__",
    "Domain",
    "IDNA2003",
    "IDNA2008",
    "IdnaMode",
    "IdnaOptions",
    "InvalidDomain",
    "PslResolverError",
    "ResolvedDomain",
    "Rule",
    "RuleKind",
    "Rules",
    "Section",
    "SuffixResolver",
    "SuffixType",
    "TopLevelDomains",
    "Trie",
    "UnableToLoadRootZoneDatabase",
    "UnableToLoadRules",
    "UnableToResolveDomain",
]
