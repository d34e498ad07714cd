import pytest

from virtprov.domain_flags import (
    DestroyFlags,
    StartFlags,
    UndefineFlags,
    destroy_flags_from_destroy,
    start_flags_from_create,
    undefine_flags_for_delete,
    undefine_flags_for_update,
)


@pytest.mark.parametrize(
    "version, expected",
    [
        (0, UndefineFlags(0)),
        (2_002_999, UndefineFlags(0)),
        (2_003_000, UndefineFlags.KEEP_NVRAM),
        (8_008_999, UndefineFlags.KEEP_NVRAM),
        (8_009_000, UndefineFlags.KEEP_NVRAM | UndefineFlags.KEEP_TPM),
    ],
)
def test_undefine_flags_for_update(version, expected):
    assert undefine_flags_for_update(version) == expected


@pytest.mark.parametrize(
    "version, expected",
    [
        (0, UndefineFlags(0)),
        (1_002_008, UndefineFlags(0)),
        (1_002_009, UndefineFlags.NVRAM),
        (8_008_999, UndefineFlags.NVRAM),
        (8_009_000, UndefineFlags.NVRAM | UndefineFlags.TPM),
    ],
)
def test_undefine_flags_for_delete(version, expected):
    assert undefine_flags_for_delete(version) == expected


def test_update_and_delete_flags_never_overlap():
    for version in (0, 1_002_009, 2_003_000, 8_009_000, 10_000_000):
        assert undefine_flags_for_update(version) & undefine_flags_for_delete(version) == 0


def test_flags_grow_with_version():
    versions = [0, 1_002_009, 2_003_000, 8_009_000, 11_000_000]
    for older, newer in zip(versions, versions[1:]):
        old_flags = undefine_flags_for_delete(older)
        assert undefine_flags_for_delete(newer) & old_flags == old_flags
        old_keep = undefine_flags_for_update(older)
        assert undefine_flags_for_update(newer) & old_keep == old_keep


def test_start_flags_none_is_zero():
    assert start_flags_from_create(None) == StartFlags(0)
    assert start_flags_from_create({}) == StartFlags(0)


def test_start_flags_paused_matches_libvirt_value():
    assert int(start_flags_from_create({"paused": True})) == 1


def test_start_flags_all_set():
    create = {
        "paused": True,
        "autodestroy": True,
        "bypass_cache": True,
        "force_boot": True,
        "validate": True,
        "reset_nvram": True,
    }
    expected = StartFlags(0)
    for member in StartFlags:
        expected |= member
    assert start_flags_from_create(create) == expected


def test_start_flags_false_and_null_ignored():
    create = {"paused": False, "autodestroy": None, "force_boot": True}
    assert start_flags_from_create(create) == StartFlags.FORCE_BOOT


def test_start_flags_unknown_option_rejected():
    with pytest.raises(ValueError):
        start_flags_from_create({"sideways": True})


def test_start_flags_non_bool_rejected():
    with pytest.raises(ValueError):
        start_flags_from_create({"paused": "yes"})


def test_destroy_flags_default():
    assert destroy_flags_from_destroy(None) == DestroyFlags.DEFAULT
    assert destroy_flags_from_destroy({"graceful": False}) == DestroyFlags.DEFAULT
    assert destroy_flags_from_destroy({"graceful": None}) == DestroyFlags.DEFAULT


def test_destroy_flags_graceful():
    assert destroy_flags_from_destroy({"graceful": True}) == DestroyFlags.GRACEFUL
    assert int(destroy_flags_from_destroy({"graceful": True})) == 1


def test_destroy_flags_unknown_option_rejected():
    with pytest.raises(ValueError):
        destroy_flags_from_destroy({"force": True})