"""Tests for loading distribution definitions from a directory."""

import json
import tempfile
from pathlib import Path

import pytest
import yaml

from distro_registry.distribution import (
    Architecture,
    DistributionLoadError,
    DistributionNotFoundError,
    Package,
    Repository,
    RepositorySourceError,
    load_distro_registry,
    read_distribution,
)

DISTS_DIR = Path(__file__).parent / "testdata" / "distributions"

VIM_PACKAGES = [
    Package("vim-minimal", "A minimal version of the VIM editor"),
    Package("vim-common", "The common files needed by any version of the VIM editor"),
    Package("vim-enhanced", "A version of the VIM editor which includes recent enhancements"),
    Package("neovim-qt", "Qt GUI for Neovim"),
    Package("vim-X11", "The VIM version of the vi editor for the X Window System - GVim"),
    Package("vim-filesystem", "VIM filesystem layout"),
]


def _write_distribution(tmpdir: str, name: str = "test-distro", **overrides) -> Path:
    """Write a valid distribution definition to a temp dir."""
    data = {
        "distribution": {
            "name": name,
            "description": overrides.get("description", f"Test distribution {name}"),
        },
        "x86_64": {
            "image_types": ["guest-image"],
            "repositories": overrides.get(
                "repositories",
                [{"id": "baseos", "baseurl": "https://example.com/baseos", "rhsm": False}],
            ),
        },
    }
    data["distribution"].update(overrides.get("distribution", {}))
    if "packages" in overrides:
        data["x86_64"]["packages"] = overrides["packages"]
    path = Path(tmpdir) / overrides.get("filename", f"{name}.json")
    path.write_text(json.dumps(data))
    return path


# --- read_distribution ---


def test_read_distribution_architecture():
    d = read_distribution(DISTS_DIR, "centos-8")
    arch = d.architecture("x86_64")

    assert arch.image_types == (
        "aws", "gcp", "azure", "ami", "vhd", "guest-image",
        "image-installer", "oci", "vsphere", "vsphere-ova", "wsl",
    )
    assert arch.repositories == (
        Repository(id="baseos", baseurl="http://mirror.centos.org/centos/8-stream/BaseOS/x86_64/os/"),
        Repository(id="appstream", baseurl="http://mirror.centos.org/centos/8-stream/AppStream/x86_64/os/"),
        Repository(id="extras", baseurl="http://mirror.centos.org/centos/8-stream/extras/x86_64/os/"),
        Repository(
            id="google-compute-engine",
            baseurl="https://packages.cloud.google.com/yum/repos/google-compute-engine-el8-x86_64-stable",
            image_type_tags=("gcp",),
        ),
        Repository(
            id="google-cloud-sdk",
            baseurl="https://packages.cloud.google.com/yum/repos/cloud-sdk-el8-x86_64",
            image_type_tags=("gcp",),
        ),
    )
    assert d.module_platform_id == "platform:el8"
    assert d.oscap_name == "centos8"
    assert d.description == "CentOS Stream 8"


def test_read_distribution_not_found():
    with pytest.raises(DistributionNotFoundError):
        read_distribution(DISTS_DIR, "none")


def test_not_found_is_distinct_from_validation_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "broken", repositories=[{"id": "baseos"}])

        with pytest.raises(RepositorySourceError) as exc:
            read_distribution(tmpdir, "broken")
        assert not isinstance(exc.value, DistributionNotFoundError)

        with pytest.raises(DistributionNotFoundError):
            read_distribution(tmpdir, "other")


def test_restricted_access_field_missing():
    assert read_distribution(DISTS_DIR, "rhel-90").is_restricted() is False


def test_restricted_access_field_false():
    assert read_distribution(DISTS_DIR, "centos-9").is_restricted() is False


def test_restricted_access_field_true():
    assert read_distribution(DISTS_DIR, "centos-8").is_restricted() is True


def test_external_package_list():
    arch = read_distribution(DISTS_DIR, "centos-8").architecture("x86_64")
    assert arch.find_packages("vim") == VIM_PACKAGES

    aarch64 = read_distribution(DISTS_DIR, "centos-8").architecture("aarch64")
    assert [p.name for p in aarch64.find_packages("vim")] == ["vim-minimal"]


def test_external_package_list_in_subdirectory():
    arch = read_distribution(DISTS_DIR, "rhel-90").architecture("x86_64")
    assert [p.name for p in arch.find_packages("vim")] == ["vim-enhanced"]


def test_inline_package_list_from_yaml():
    arch = read_distribution(DISTS_DIR, "centos-9").architecture("x86_64")
    assert [p.name for p in arch.find_packages("vim")] == ["vim-minimal", "Vim-Docs"]
    assert arch.repositories[0].metalink.startswith("https://mirrors.centos.org/metalink")
    assert arch.repositories[0].baseurl is None


def test_no_package_list_distribution():
    d = read_distribution(DISTS_DIR, "no-packages-distro")
    arch = d.architecture("x86_64")
    assert d.no_package_list
    assert arch.packages is None
    assert arch.find_packages("vim") == []


def test_no_package_list_ignores_adjacent_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "lean", distribution={"no_package_list": True})
        (Path(tmpdir) / "lean-packages.json").write_text("not json at all")

        arch = read_distribution(tmpdir, "lean").architecture("x86_64")
        assert arch.packages is None


def test_missing_package_list_leaves_index_absent():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "unindexed")
        arch = read_distribution(tmpdir, "unindexed").architecture("x86_64")
        assert arch.packages is None
        assert arch.find_packages("vim") == []


# --- load_distro_registry ---


def test_load_fixture_directory():
    registry = load_distro_registry(DISTS_DIR)
    assert registry.names() == ["centos-8", "centos-9", "no-packages-distro", "rhel-90"]


def test_load_is_deterministic():
    first = load_distro_registry(DISTS_DIR)
    second = load_distro_registry(DISTS_DIR)

    assert first is not second
    assert first == second
    for name in first.names():
        a, b = first.get(name), second.get(name)
        assert a.architecture_names() == b.architecture_names()
        for arch_name in a.architecture_names():
            assert a.architecture(arch_name).repositories == b.architecture(arch_name).repositories


def test_loads_are_independent():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "only-one")
        small = load_distro_registry(tmpdir)
        full = load_distro_registry(DISTS_DIR)

        assert small.names() == ["only-one"]
        assert "only-one" not in full


def test_load_invalid_repository_aborts():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "good")
        _write_distribution(
            tmpdir,
            "bad",
            repositories=[
                {"id": "baseos", "baseurl": "https://a", "metalink": "https://b"},
            ],
        )
        with pytest.raises(RepositorySourceError) as exc:
            load_distro_registry(tmpdir)
        assert exc.value.distribution == "bad"
        assert exc.value.architecture == "x86_64"
        assert exc.value.repository_id == "baseos"


def test_load_duplicate_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "twice")
        _write_distribution(tmpdir, "twice", filename="twice.yaml")
        with pytest.raises(DistributionLoadError, match="already defined"):
            load_distro_registry(tmpdir)
        with pytest.raises(DistributionLoadError, match="already defined"):
            read_distribution(tmpdir, "twice")


def test_load_unparsable_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "garbage.json").write_text("{not json")
        with pytest.raises(DistributionLoadError) as exc:
            load_distro_registry(tmpdir)
        assert exc.value.path.endswith("garbage.json")


def test_load_invalid_yaml():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "garbage.yaml").write_text("{{invalid yaml::: [")
        with pytest.raises(DistributionLoadError, match="cannot parse"):
            load_distro_registry(tmpdir)


def test_load_schema_violation():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "typo.yaml"
        path.write_text(
            yaml.dump(
                {
                    "distribution": {"name": "typo", "restricted_access": "yes"},
                    "x86_64": {"image_types": [], "repositories": []},
                }
            )
        )
        with pytest.raises(DistributionLoadError, match="restricted_access"):
            load_distro_registry(tmpdir)


def test_load_missing_distribution_block():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "anon.json").write_text(json.dumps({"x86_64": {}}))
        with pytest.raises(DistributionLoadError, match="distribution"):
            load_distro_registry(tmpdir)


def test_load_missing_directory():
    with pytest.raises(DistributionLoadError):
        load_distro_registry("/nonexistent/distributions")


def test_load_empty_directory():
    with tempfile.TemporaryDirectory() as tmpdir:
        registry = load_distro_registry(tmpdir)
        assert len(registry) == 0
        assert registry.available(True).list() == []


def test_load_ignores_unrelated_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "fedora-39")
        (Path(tmpdir) / "README.md").write_text("# Distributions\n")
        registry = load_distro_registry(tmpdir)
        assert registry.names() == ["fedora-39"]


def test_load_malformed_package_list():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "fedora-39")
        (Path(tmpdir) / "fedora-39-packages.json").write_text(
            json.dumps({"x86_64": [{"summary": "no name"}]})
        )
        with pytest.raises(DistributionLoadError, match="name"):
            load_distro_registry(tmpdir)


def test_inline_packages_win_over_external():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(
            tmpdir, "fedora-39", packages=[{"name": "vim-tiny", "summary": "inline"}]
        )
        (Path(tmpdir) / "fedora-39-packages.json").write_text(
            json.dumps({"x86_64": [{"name": "vim-external", "summary": "external"}]})
        )
        arch = read_distribution(tmpdir, "fedora-39").architecture("x86_64")
        assert arch.find_packages("vim") == [Package("vim-tiny", "inline")]


def test_loaded_architecture_is_comparable_to_hand_built():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "fedora-39", packages=[])
        arch = read_distribution(tmpdir, "fedora-39").architecture("x86_64")
        assert arch == Architecture(
            name="x86_64",
            image_types=("guest-image",),
            repositories=(Repository(id="baseos", baseurl="https://example.com/baseos"),),
            packages=(),
        )


def test_read_distribution_ignores_unrelated_broken_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "aaa-broken.json").write_text("{not json")
        _write_distribution(tmpdir, "centos-8")

        assert read_distribution(tmpdir, "centos-8").name == "centos-8"
        with pytest.raises(DistributionNotFoundError):
            read_distribution(tmpdir, "none")


def test_read_distribution_broken_target_is_not_not_found():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "centos-8.json").write_text("{not json")
        with pytest.raises(DistributionLoadError) as exc:
            read_distribution(tmpdir, "centos-8")
        assert not isinstance(exc.value, DistributionNotFoundError)


def test_declared_name_must_match_file_name():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "centos-8", filename="centos-9.json")
        with pytest.raises(DistributionLoadError, match="declares distribution 'centos-8'"):
            load_distro_registry(tmpdir)
        with pytest.raises(DistributionLoadError):
            read_distribution(tmpdir, "centos-9")
        with pytest.raises(DistributionNotFoundError):
            read_distribution(tmpdir, "centos-8")


def test_load_invalid_utf8():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "bad.yaml").write_bytes(b"\xff\xfe distribution: {}")
        with pytest.raises(DistributionLoadError, match="cannot read"):
            load_distro_registry(tmpdir)


def test_load_non_canonical_architecture():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = _write_distribution(tmpdir, "fedora-39")
        data = json.loads(path.read_text())
        data["aarch_64"] = data["x86_64"]
        path.write_text(json.dumps(data))
        with pytest.raises(DistributionLoadError, match="unexpected property 'aarch_64'"):
            load_distro_registry(tmpdir)


def test_packages_suffix_without_definition_is_a_distribution():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "dev-packages")
        registry = load_distro_registry(tmpdir)
        assert registry.names() == ["dev-packages"]
        assert read_distribution(tmpdir, "dev-packages").name == "dev-packages"


def test_package_list_paired_with_definition_is_not_a_distribution():
    with tempfile.TemporaryDirectory() as tmpdir:
        _write_distribution(tmpdir, "fedora-39")
        (Path(tmpdir) / "fedora-39-packages.yaml").write_text(
            yaml.dump({"x86_64": [{"name": "vim-minimal", "summary": "vim"}]})
        )
        registry = load_distro_registry(tmpdir)
        assert registry.names() == ["fedora-39"]
        assert registry.get("fedora-39").architecture("x86_64").find_packages("vim") == [
            Package("vim-minimal", "vim")
        ]
