import pytest

from aionland.packages import (
    MAX_PACKAGES,
    Package,
    PackageError,
    PackageManager,
    PackageStatus,
)


@pytest.fixture
def manager():
    return PackageManager(free_space=10**9)


def test_install_marks_package_installed(manager):
    manager.add_package(Package("gcc", "1.0", installed_size=100))
    package = manager.install("gcc")
    assert package.status == PackageStatus.INSTALLED
    assert package.install_date is not None
    assert manager.find("gcc").status == PackageStatus.INSTALLED


def test_install_installs_dependencies_first(manager):
    manager.add_package(Package("app", dependencies=["lib", "util"]))
    manager.add_package(Package("lib", dependencies=["util"]))
    manager.add_package(Package("util"))
    manager.install("app")
    for name in ("app", "lib", "util"):
        assert manager.find(name).status == PackageStatus.INSTALLED
    assert manager.find("util").install_date <= manager.find("lib").install_date
    assert manager.find("lib").install_date <= manager.find("app").install_date


def test_install_unknown_package_raises(manager):
    with pytest.raises(PackageError, match="Package not found: ghost"):
        manager.install("ghost")


def test_install_missing_dependency_raises(manager):
    manager.add_package(Package("app", dependencies=["ghost"]))
    with pytest.raises(PackageError, match="Failed to install dependency: ghost"):
        manager.install("app")
    assert manager.find("app").status == PackageStatus.NOT_INSTALLED


def test_install_already_installed_is_unchanged(manager):
    manager.add_package(Package("gcc"))
    first = manager.install("gcc").install_date
    assert manager.install("gcc").install_date == first


def test_install_insufficient_space_raises():
    manager = PackageManager(free_space=10)
    manager.add_package(Package("big", installed_size=11))
    with pytest.raises(PackageError, match="Insufficient disk space"):
        manager.install("big")
    assert manager.find("big").status == PackageStatus.NOT_INSTALLED


def test_install_circular_dependency_raises(manager):
    manager.add_package(Package("a", dependencies=["b"]))
    manager.add_package(Package("b", dependencies=["a"]))
    with pytest.raises(PackageError):
        manager.install("a")


def test_recommend_gcc():
    assert PackageManager(free_space=0).recommend("gcc") == ["make", "gdb", "cmake"]


def test_recommend_unknown_is_empty():
    assert PackageManager(free_space=0).recommend("vim") == []


def test_analyze_dependencies_returns_copy(manager):
    package = Package("app", dependencies=["lib"])
    deps = manager.analyze_dependencies(package)
    deps.append("extra")
    assert package.dependencies == ["lib"]


def test_auto_cleanup_finds_unneeded(manager):
    manager.add_package(Package("app", dependencies=["lib"]))
    manager.add_package(Package("lib"))
    manager.add_package(Package("idle"))
    manager.install("app")
    assert manager.auto_cleanup() == ["app"]


def test_auto_cleanup_ignores_not_installed_dependents(manager):
    manager.add_package(Package("app", dependencies=["lib"]))
    manager.add_package(Package("lib"))
    manager.install("lib")
    assert manager.auto_cleanup() == ["lib"]


def test_database_capacity(manager):
    for index in range(MAX_PACKAGES):
        manager.add_package(Package(f"p{index}"))
    with pytest.raises(PackageError):
        manager.add_package(Package("overflow"))
    assert len(manager.packages) == MAX_PACKAGES


def test_too_many_dependencies_rejected():
    with pytest.raises(ValueError):
        Package("x", dependencies=[f"d{i}" for i in range(33)])