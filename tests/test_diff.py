from conftest import make_packages

from diff import calculate_diff, is_kernel_package, is_security_package


def names(packages):
    return {p.name for p in packages}


def test_diff_example_added_removed_updated():
    old = make_packages(("foo", "1.0"), ("bar", "2.0"))
    new = make_packages(("foo", "1.1"), ("baz", "1.0"))

    diff = calculate_diff(old, new)

    assert names(diff.added) == {"baz"}
    assert names(diff.removed) == {"bar"}
    assert len(diff.updated) == 1
    update = diff.updated[0]
    assert (update.name, update.old_version, update.new_version) == ("foo", "1.0", "1.1")


def test_every_name_lands_in_exactly_one_bucket():
    old = make_packages(("a", "1"), ("b", "1"), ("c", "1"), ("d", "2"))
    new = make_packages(("b", "1"), ("c", "2"), ("d", "2"), ("e", "1"))

    diff = calculate_diff(old, new)
    added, removed = names(diff.added), names(diff.removed)
    updated = {u.name for u in diff.updated}

    assert added == {"e"}
    assert removed == {"a"}
    assert updated == {"c"}
    assert not (added & removed) and not (added & updated) and not (removed & updated)
    # identical name and version on both sides appear nowhere
    assert "b" not in added | removed | updated
    assert "d" not in added | removed | updated


def test_diff_is_antisymmetric():
    a = make_packages(("foo", "1.0"), ("bar", "2.0"), ("qux", "1"))
    b = make_packages(("foo", "1.1"), ("baz", "1.0"), ("qux", "1"))

    forward = calculate_diff(a, b)
    backward = calculate_diff(b, a)

    assert names(forward.added) == names(backward.removed)
    assert names(forward.removed) == names(backward.added)
    assert {(u.name, u.old_version, u.new_version) for u in forward.updated} == {
        (u.name, u.new_version, u.old_version) for u in backward.updated
    }


def test_identical_sets_give_empty_diff():
    pkgs = make_packages(("foo", "1.0"), ("bar", "2.0"))
    diff = calculate_diff(pkgs, list(pkgs))
    assert diff.is_empty()
    assert diff.summary() == "+0 added · -0 removed · ~0 updated"


def test_empty_sides():
    pkgs = make_packages(("foo", "1.0"))
    assert names(calculate_diff([], pkgs).added) == {"foo"}
    assert names(calculate_diff(pkgs, []).removed) == {"foo"}
    assert calculate_diff([], []).is_empty()


def test_duplicate_names_last_entry_wins():
    old = make_packages(("foo", "1.0"), ("foo", "1.1"))
    new = make_packages(("foo", "1.1"))
    assert calculate_diff(old, new).is_empty()


def test_repeated_names_are_listed_once():
    old = make_packages(("bar", "1.0"), ("bar", "1.2"))
    new = make_packages(("baz", "2.0"), ("baz", "2.1"))

    diff = calculate_diff(old, new)

    assert [(p.name, p.version) for p in diff.added] == [("baz", "2.1")]
    assert [(p.name, p.version) for p in diff.removed] == [("bar", "1.2")]


def test_update_flags_kernel_and_security():
    old = make_packages(("linux", "6.6.50"), ("openssl", "3.0.12"), ("ripgrep", "14.0"))
    new = make_packages(("linux", "6.6.52"), ("openssl", "3.0.13"), ("ripgrep", "14.1"))

    updates = {u.name: u for u in calculate_diff(old, new).updated}

    assert updates["linux"].is_kernel and not updates["linux"].is_security
    assert updates["openssl"].is_security and not updates["openssl"].is_kernel
    assert not updates["ripgrep"].is_kernel and not updates["ripgrep"].is_security


def test_classifiers():
    assert is_kernel_package("linux")
    assert is_kernel_package("linux-firmware")
    assert not is_kernel_package("util-linux")
    assert is_security_package("openssh")
    assert is_security_package("libgpg-error")
    assert not is_security_package("firefox")


def test_summary_counts():
    diff = calculate_diff(
        make_packages(("foo", "1.0"), ("bar", "2.0")),
        make_packages(("foo", "1.1"), ("baz", "1.0"), ("qux", "1")),
    )
    assert diff.summary() == "+2 added · -1 removed · ~1 updated"
