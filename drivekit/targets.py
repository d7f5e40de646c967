import logging
import platform
import dataclasses as dt

from typing import Optional

_logger = logging.getLogger(__name__)

ARCHS = [
    "x86_64",
    "i686",
    "arm64",
    "aarch64",
    "armv7",
    "riscv64",
    "wasm32",
]

OSES = [
    "linux",
    "macosx",
    "ios",
    "windows",
    "freebsd",
    "wasi",
    "none",
]

DARWIN_OSES = ["macosx", "ios"]


@dt.dataclass(frozen=True)
class Triple:
    """
    A target platform, written `arch-vendor-os[-environment]`.
    """

    arch: str
    vendor: str
    os: str
    """Operating system, possibly followed by a version (`macosx14.0`)."""
    environment: Optional[str] = None

    @property
    def triple(self) -> str:
        parts = [self.arch, self.vendor, self.os]
        if self.environment:
            parts.append(self.environment)
        return "-".join(parts)

    @property
    def osName(self) -> str:
        return self.os.rstrip("0123456789.")

    @property
    def isDarwin(self) -> bool:
        return self.osName in DARWIN_OSES

    def __str__(self) -> str:
        return self.triple

    @staticmethod
    def parse(s: str) -> Optional["Triple"]:
        """Parse a target triple, returning None if it names no known target."""
        parts = s.split("-")
        if len(parts) not in (3, 4) or any(len(p) == 0 for p in parts):
            return None

        result = Triple(*parts)
        if result.arch not in ARCHS or result.osName not in OSES:
            return None

        return result

    @staticmethod
    def host() -> "Triple":
        un = platform.uname()

        machine = un.machine
        match machine:
            case "aarch64":
                machine = "arm64"
            case "AMD64":
                machine = "x86_64"
            case _:
                pass

        match un.system.lower():
            case "darwin":
                result = Triple(machine, "apple", "macosx")
            case "windows":
                result = Triple(machine, "unknown", "windows", "msvc")
            case "freebsd":
                result = Triple(machine, "unknown", "freebsd")
            case _:
                result = Triple(machine, "unknown", "linux", "gnu")

        _logger.debug(f"host triple: {result}")
        return result
