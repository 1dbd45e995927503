import pytest

from passlink.native.matching import normalize_host, parent_domains, query_entries, query_host

NAMES = [
    "awesomePrefix/foo/bar",
    "awesomePrefix/fixed/secret",
    "awesomePrefix/fixed/yamllogin",
    "awesomePrefix/fixed/yamlother",
    "awesomePrefix/some.other.host/other",
    "awesomePrefix/b/some.other.host",
    "awesomePrefix/evilsome.other.host",
    "evilsome.other.host/something",
    "awesomePrefix/other.host/other",
    "somename/github.com",
]


def test_query_no_match():
    assert query_entries(NAMES, "notfound") == []


def test_query_matches_full_path():
    assert query_entries(NAMES, "foo") == ["awesomePrefix/foo/bar"]
    assert query_entries(NAMES, "Prefix/fixed") == [
        "awesomePrefix/fixed/secret",
        "awesomePrefix/fixed/yamllogin",
        "awesomePrefix/fixed/yamlother",
    ]


def test_query_is_case_sensitive():
    assert query_entries(NAMES, "yaml") == [
        "awesomePrefix/fixed/yamllogin",
        "awesomePrefix/fixed/yamlother",
    ]
    assert query_entries(NAMES, "YAML") == []


def test_host_uses_most_specific_parent_domain():
    assert query_host(NAMES, "find.some.other.host") == [
        "awesomePrefix/b/some.other.host",
        "awesomePrefix/some.other.host/other",
    ]


def test_host_does_not_match_subdomains_of_query():
    assert query_host(NAMES, "other.host") == ["awesomePrefix/other.host/other"]


def test_host_with_different_domain_appended():
    assert query_host(NAMES, "some.other.host.different.domain") == []


def test_host_ending_in_public_suffix():
    assert query_host(NAMES, "github.com") == ["somename/github.com"]


def test_host_never_matches_across_label_boundary():
    result = query_host(NAMES, "find.some.other.host")
    assert "awesomePrefix/evilsome.other.host" not in result
    assert "evilsome.other.host/something" not in result


def test_host_matches_segment_at_any_depth():
    names = ["a/b/c/example.com/alice", "example.com", "x/example.com/y/z"]
    assert query_host(names, "example.com") == sorted(names)


def test_host_match_ignores_case():
    assert query_host(["web/Example.COM/alice"], "LOGIN.example.com") == ["web/Example.COM/alice"]


def test_single_label_host():
    assert query_host(["intranet/localhost"], "localhost") == ["intranet/localhost"]
    assert query_host(["intranet/localhost"], "other") == []


def test_top_level_domain_alone_never_matches():
    assert query_host(["tld/com"], "example.com") == []


@pytest.mark.parametrize("raw, expected", [
    ("example.com", "example.com"),
    ("https://login.Example.com/path?q=1", "login.example.com"),
    ("example.com:8443", "example.com"),
    ("example.com.", "example.com"),
    ("", ""),
])
def test_normalize_host(raw, expected):
    assert normalize_host(raw) == expected


def test_origin_is_accepted():
    assert query_host(NAMES, "https://github.com") == ["somename/github.com"]


def test_parent_domains():
    assert parent_domains("a.b.c.d") == ["a.b.c.d", "b.c.d", "c.d"]
    assert parent_domains("localhost") == ["localhost"]


@pytest.mark.parametrize("host", ["a[b:1", "https://[x", "http://[::1"])
def test_unparsable_host_matches_nothing(host):
    assert normalize_host(host) == ""
    assert query_host(NAMES, host) == []
