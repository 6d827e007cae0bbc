"""`pslresolver` splits a domain name into its public suffix, registrable domain,
and subdomain, using the Public Suffix List (PSL).

    >>> from pslresolver import Rules
    >>> rules = Rules.from_path("public_suffix_list.dat")
    >>> resolved = rules.resolve("forums.bbc.co.uk")
    >>> str(resolved.public_suffix), str(resolved.registrable_domain)
    ('co.uk', 'bbc.co.uk')
    >>> resolved.suffix_type
    <SuffixType.ICANN: 'ICANN'>

Lookups can be limited to the list's ICANN or PRIVATE section, and every
result reports which section its suffix came from. Internationalized domain
names are handled in both their Unicode and ASCII (Punycode) forms.
"""

from setuptools import setup

INSTALL_REQUIRES = ["idna>=3.0"]

setup(
    name="pslresolver",
    description=(
        "Splits a domain name into its public suffix, registrable domain, "
        "and subdomain, using the Public Suffix List (PSL), with ICANN and "
        "PRIVATE section provenance and IDNA support."
    ),
    license="BSD License",
    keywords="domain subdomain public suffix list publicsuffix psl idna registrable",
    packages=["pslresolver"],
    include_package_data=True,
    python_requires=">=3.9",
    long_description=__doc__,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Topic :: Internet :: Name Service (DNS)",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    setup_requires=["setuptools_scm"],
    use_scm_version={
        "write_to": "pslresolver/_version.py",
        "fallback_version": "1.0.0",
    },
    install_requires=INSTALL_REQUIRES,
    extras_require={"testing": ["pytest", "pytest-mock"]},
)
