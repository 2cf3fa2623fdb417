import errno

import pytest

from oracompat.directories import (
    INVALID_OPERATION,
    INVALID_PATH,
    DirectoryRegistry,
    UtlFileError,
    _from_os_error,
)


@pytest.fixture
def registry():
    reg = DirectoryRegistry()
    reg.add("DATA", "/srv/data")
    reg.add(None, "/var/spool/")
    return reg


def test_lookup_named_directory(registry):
    assert registry.lookup("DATA") == "/srv/data"


def test_lookup_unknown_returns_none(registry):
    assert registry.lookup("OTHER") is None


def test_lookup_is_case_sensitive(registry):
    assert registry.lookup("data") is None


def test_safe_path_with_named_location(registry):
    assert registry.safe_path("DATA", "report.txt") == "/srv/data/report.txt"


def test_safe_path_with_plain_directory(registry):
    assert registry.safe_path("/srv/data/sub", "f.txt") == "/srv/data/sub/f.txt"


def test_safe_path_canonicalizes(registry):
    assert registry.safe_path("/srv/data//sub/.", "f.txt") == "/srv/data/sub/f.txt"


def test_safe_path_directory_with_trailing_slash(registry):
    assert registry.safe_path("/var/spool", "job") == "/var/spool/job"


def test_safe_path_outside_registered_directory(registry):
    with pytest.raises(UtlFileError) as info:
        registry.safe_path("/etc", "passwd")
    assert info.value.name == INVALID_PATH
    assert info.value.detail == "you cannot access locality"


def test_safe_path_rejects_traversal(registry):
    with pytest.raises(UtlFileError) as info:
        registry.safe_path("/srv/data/..", "secret.txt")
    assert info.value.name == INVALID_PATH


def test_prefix_of_other_directory_is_not_enough(registry):
    with pytest.raises(UtlFileError):
        registry.safe_path("/srv/data2", "f.txt")


def test_check_locality_accepts_child(registry):
    registry.check_locality("/srv/data/x")
    with pytest.raises(UtlFileError):
        registry.check_locality("/srv/data")


@pytest.mark.parametrize("location, filename", [("", "a"), ("DATA", "")])
def test_empty_arguments_rejected(registry, location, filename):
    with pytest.raises(ValueError, match="Empty string"):
        registry.safe_path(location, filename)


def test_null_arguments_rejected(registry):
    with pytest.raises(ValueError, match="null value not allowed"):
        registry.safe_path(None, "a")


def test_empty_registry_rejects_everything():
    with pytest.raises(UtlFileError):
        DirectoryRegistry().safe_path("/tmp", "x")


def test_os_error_mapping():
    missing = _from_os_error(OSError(errno.ENOENT, "No such file"))
    other = _from_os_error(OSError(errno.EISDIR, "Is a directory"))
    assert missing.name == INVALID_PATH
    assert other.name == INVALID_OPERATION
    assert other.detail == "Is a directory"