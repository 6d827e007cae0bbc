"""Domain value tests."""

import pytest

from pslresolver import IDNA2003, Domain, InvalidDomain


def test_empty_domains() -> None:
    """Test `None` and the empty string are different domains."""
    none = Domain.from_string(None)
    assert len(none) == 0
    assert none.value is None
    assert not none.is_resolvable

    empty = Domain.from_string("")
    assert len(empty) == 1
    assert empty.value == ""
    assert not empty.is_resolvable


def test_labels_keep_presentation() -> None:
    """Test labels keep case and script, and ASCII labels are normalized."""
    domain = Domain.from_string("WWW.Example.公司.cn")
    assert domain.labels == ("WWW", "Example", "公司", "cn")
    assert domain.ascii_labels == ("www", "example", "xn--55qx5d", "cn")
    assert str(domain) == "WWW.Example.公司.cn"
    assert not domain.is_ascii
    assert list(domain) == ["WWW", "Example", "公司", "cn"]


def test_equality_ignores_presentation() -> None:
    """Test domains compare by their ASCII form."""
    assert Domain.from_string("WWW.公司.cn") == Domain.from_string("www.xn--55qx5d.cn")
    assert hash(Domain.from_string("WWW.公司.cn")) == hash(
        Domain.from_string("www.xn--55qx5d.cn")
    )
    assert Domain.from_string("example.com") != Domain.from_string("example.net")


def test_conversions() -> None:
    """Test ASCII and Unicode conversions, and their round trip."""
    domain = Domain.from_string("www.食狮.公司.cn")
    assert str(domain.to_ascii()) == "www.xn--85x722f.xn--55qx5d.cn"
    assert str(domain.to_ascii().to_unicode()) == "www.食狮.公司.cn"
    assert domain.to_unicode().to_ascii() == domain.to_ascii()
    assert domain.to_ascii().is_ascii


def test_idna_options_travel_with_the_domain() -> None:
    """Test conversions use the options the domain was parsed with."""
    domain = Domain.from_string("faß.de", IDNA2003)
    assert domain.ascii_labels == ("fass", "de")
    assert str(domain.to_unicode()) == "fass.de"
    assert domain.idna_options is IDNA2003

    assert Domain.from_string("faß.de").ascii_labels == ("xn--fa-hia", "de")


def test_root_dot_and_separators() -> None:
    """Test the trailing root dot and ideographic full stops."""
    assert Domain.from_string("example.com.").labels == ("example", "com")
    assert Domain.from_string("example。com").labels == ("example", "com")
    assert Domain.from_string("example..com").labels == ("example", "", "com")


def test_percent_encoding() -> None:
    """Test percent-encoded input is decoded before parsing."""
    assert Domain.from_string("www.ex%61mple.com") == Domain.from_string(
        "www.example.com"
    )
    assert Domain.from_string("%E5%85%AC%E5%8F%B8.cn").labels == ("公司", "cn")


@pytest.mark.parametrize(
    "value", ["127.0.0.1", "[::1]", "::1", "[fe80::1%eth0]", "[aBcD::1]"]
)
def test_ip_literals(value: str) -> None:
    """Test IP literals are kept whole and cannot carry a suffix."""
    domain = Domain.from_string(value)
    assert domain.is_ip
    assert domain.value == value
    assert len(domain) == 1
    assert not domain.is_resolvable
    assert domain.to_ascii() is domain


def test_not_ip_literals() -> None:
    """Test near misses are parsed as domain names."""
    assert not Domain.from_string("127.0.0.1.1").is_ip
    assert not Domain.from_string("256.1.1.1").is_ip


def test_invalid_domains() -> None:
    """Test malformed domains raise with the offending value."""
    with pytest.raises(InvalidDomain, match="is invalid") as excinfo:
        Domain.from_string("re view.com")
    assert excinfo.value.domain == "re view.com"

    with pytest.raises(InvalidDomain, match="253 octets"):
        Domain.from_string(".".join(["a" * 63] * 4) + ".com")


def test_slicing() -> None:
    """Test labels and sub-domains by index."""
    domain = Domain.from_string("forums.bbc.co.uk")
    assert domain[0] == "forums"
    assert domain[-1] == "uk"
    assert domain[-2:] == Domain.from_string("co.uk")
    assert str(domain[:2].join(Domain.from_string("com"))) == "forums.bbc.com"
