import pytest

from inputs_fsck.models import Bzr, Git, Hg, PlainUrl, Svn, Unknown
from inputs_fsck.sources import classify, split_filename


def test_plain_url_without_override() -> None:
    source = classify("https://example.com/pkg.tar.gz", 3)

    assert source.index == 3
    assert source.scheme == PlainUrl("https")
    assert source.filename_override is None
    assert source.vcs_params == {}
    assert source.url == "https://example.com/pkg.tar.gz"
    assert source.filename == "pkg.tar.gz"


def test_filename_override_is_stripped() -> None:
    source = classify("foo-1.0.tar.gz::https://example.com/v1.0.tar.gz", 0)

    assert source.filename_override == "foo-1.0.tar.gz"
    assert source.url == "https://example.com/v1.0.tar.gz"
    assert source.filename == "foo-1.0.tar.gz"
    assert source.raw == "foo-1.0.tar.gz::https://example.com/v1.0.tar.gz"


def test_double_colon_inside_url_path_is_not_an_override() -> None:
    assert split_filename("https://example.com/a::b") == (None, "https://example.com/a::b")


@pytest.mark.parametrize("transport", ["http", "https", "ftp", "ftps", "file", "rsync", "source"])
def test_known_transports_are_plain_urls(transport: str) -> None:
    assert classify(f"{transport}://example.com/x", 0).scheme == PlainUrl(transport)


def test_plain_url_keeps_literal_protocol_token() -> None:
    assert classify("HTTPS://example.com/x", 0).scheme == PlainUrl("HTTPS")


def test_git_sources_parse_fragment_params() -> None:
    source = classify("git+https://example.com/repo.git#commit=abc123", 0)

    assert source.scheme == Git()
    assert source.vcs_params == {"commit": "abc123"}
    assert source.url == "git+https://example.com/repo.git"


def test_bare_git_protocol_is_git() -> None:
    assert classify("git://example.com/repo.git", 0).scheme == Git()


def test_git_signed_tag_with_override() -> None:
    source = classify("name::git+ssh://example.com/repo.git#tag=v1?signed", 0)

    assert source.scheme == Git()
    assert source.filename_override == "name"
    assert source.vcs_params == {"tag": "v1"}
    assert source.signed is True


def test_unrecognised_fragment_keys_are_dropped() -> None:
    source = classify("git+https://example.com/r.git#foo=bar&branch=main&commit=x", 0)

    assert source.vcs_params == {"branch": "main", "commit": "x"}


@pytest.mark.parametrize(
    ("raw", "scheme", "params"),
    [
        ("svn+https://example.com/trunk#revision=123", Svn(), {"revision": "123"}),
        ("hg+https://example.com/r#revision=abc&branch=default", Hg(), {"revision": "abc", "branch": "default"}),
        ("bzr+https://example.com/r#revision=7", Bzr(), {"revision": "7"}),
        ("svn+https://example.com/trunk#commit=1", Svn(), {}),
    ],
)
def test_other_vcs_schemes(raw: str, scheme: object, params: dict[str, str]) -> None:
    source = classify(raw, 0)

    assert source.scheme == scheme
    assert source.vcs_params == params


def test_plain_url_fragment_is_not_parsed() -> None:
    source = classify("https://example.com/a.tar.gz#commit=abc", 0)

    assert source.vcs_params == {}
    assert source.url == "https://example.com/a.tar.gz#commit=abc"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("foo::customproto://example.com/x", Unknown("customproto")),
        ("gitlab://example.com/x", Unknown("gitlab")),
        ("fix.patch", Unknown("")),
        ("$_url/foo.tar.gz", Unknown("")),
        ("", Unknown("")),
    ],
)
def test_unknown_schemes(raw: str, expected: Unknown) -> None:
    assert classify(raw, 0).scheme == expected


def test_signature_file_detection() -> None:
    assert classify("https://example.com/a.tar.gz.sig", 0).is_signature_file
    assert classify("a.tar.gz.asc::https://example.com/download?id=1", 0).is_signature_file
    assert not classify("https://example.com/a.tar.gz", 0).is_signature_file


def test_classified_sources_are_hashable_and_read_only() -> None:
    source = classify("git+https://example.com/r.git#commit=abc", 0)

    assert hash(source) == hash(classify("git+https://example.com/r.git#commit=abc", 0))
    assert len({source, classify("git+https://example.com/r.git#commit=abc", 0)}) == 1
    with pytest.raises(TypeError):
        source.vcs_params["commit"] = "def"  # type: ignore[index]
