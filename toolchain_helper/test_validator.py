import pytest

from .config import MsvcVersionPolicy
from .core_types import (
    Architecture,
    ArchitectureMismatchError,
    CompilerInfo,
    ErrorKind,
    OSVariant,
    VersionIncompatibleError,
)
from .validator import (
    validate_darwin,
    validate_linux,
    validate_toolchain,
    validate_windows,
)


def msvc(major, minor=0, patch=0, arch="x64"):
    return CompilerInfo("microsoft", "C/C++ Optimizing Compiler", "cl", major, minor, patch, arch)


def gcc(arch="x86_64"):
    return CompilerInfo("pc", "GNU project C and C++ compiler", "gcc", 9, 3, 0, arch)


def clang(arch="x86_64"):
    return CompilerInfo("apple", "LLVM", "clang", 12, 0, 0, arch)


# --- Windows ---


@pytest.mark.parametrize("major", [19, 20])
def test_windows_accepts_modern_msvc(major):
    validate_windows(msvc(major, 16, 27032), runtime_version=17)


def test_windows_rejects_old_msvc():
    with pytest.raises(VersionIncompatibleError) as excinfo:
        validate_windows(msvc(18, 0, 40629), runtime_version=11)
    assert "Visual Studio 2015" in str(excinfo.value)
    assert "18.0.40629" in str(excinfo.value)
    assert excinfo.value.error_code is ErrorKind.VERSION_INCOMPATIBLE


def test_windows_legacy_runtime_requires_exact_version():
    validate_windows(msvc(16, 0, 40219), runtime_version=8)

    with pytest.raises(VersionIncompatibleError) as excinfo:
        validate_windows(msvc(19, 16, 27032), runtime_version=8)
    assert "Windows SDK 7.1" in str(excinfo.value)

    with pytest.raises(VersionIncompatibleError):
        validate_windows(msvc(16, 1, 0), runtime_version=8)


def test_windows_policy_is_configurable():
    policy = MsvcVersionPolicy(minimum_major=20, legacy_runtime_version=9)

    with pytest.raises(VersionIncompatibleError):
        validate_windows(msvc(19, 29), runtime_version=17, policy=policy)
    validate_windows(msvc(16, 0), runtime_version=9, policy=policy)
    # Runtime 8 is no longer the legacy runtime under this policy
    with pytest.raises(VersionIncompatibleError):
        validate_windows(msvc(16, 0), runtime_version=8, policy=policy)


@pytest.mark.parametrize("arch", ["80x86", "x86", "arm64"])
def test_windows_requires_amd64(arch):
    with pytest.raises(ArchitectureMismatchError) as excinfo:
        validate_windows(msvc(19, 16, 27032, arch), runtime_version=17)
    assert f"({arch} unsupported)" in str(excinfo.value)


# --- Darwin ---


def test_darwin_accepts_amd64():
    validate_darwin(clang("x86_64"))


def test_darwin_rejects_other_architectures():
    with pytest.raises(ArchitectureMismatchError) as excinfo:
        validate_darwin(clang("arm64"))
    assert "Darwin" in str(excinfo.value)
    assert "arm64 unsupported" in str(excinfo.value)


# --- Linux ---


@pytest.mark.parametrize(
    "arch, required",
    [
        ("x86_64", Architecture.AMD64),
        ("aarch64", Architecture.AARCH64),
        ("sparc64", Architecture.SPARC),
    ],
)
def test_linux_accepts_matching_architecture(arch, required):
    validate_linux(gcc(arch), required)


def test_linux_rejects_mismatch():
    with pytest.raises(ArchitectureMismatchError) as excinfo:
        validate_linux(gcc("aarch64"), Architecture.AMD64)
    message = str(excinfo.value)
    assert "aarch64" in message
    assert "amd64" in message
    assert excinfo.value.error_code is ErrorKind.ARCHITECTURE_MISMATCH


@pytest.mark.parametrize(
    "arch, required",
    [
        ("riscv64", Architecture.UNKNOWN),
        ("ppc64le", Architecture.UNKNOWN),
        ("i686", Architecture.UNSUPPORTED),
    ],
)
def test_linux_rejects_unusable_architecture_even_when_equal(arch, required):
    """A toolchain without a supported canonical architecture never passes."""
    with pytest.raises(ArchitectureMismatchError) as excinfo:
        validate_linux(gcc(arch), required)
    assert arch in str(excinfo.value)


# --- Dispatch ---


def test_validate_toolchain_applies_only_the_variant_rules():
    # aarch64 is fine on Linux when the build targets aarch64 ...
    validate_toolchain(gcc("aarch64"), OSVariant.LINUX, Architecture.AARCH64, 17)
    # ... but Darwin only accepts amd64
    with pytest.raises(ArchitectureMismatchError):
        validate_toolchain(clang("aarch64"), OSVariant.DARWIN, Architecture.AARCH64, 17)


def test_validate_toolchain_windows_ignores_required_arch():
    validate_toolchain(msvc(19, 16), OSVariant.WINDOWS, Architecture.AARCH64, 17)
