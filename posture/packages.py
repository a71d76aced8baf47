"""Installed-software inventory and host application metadata."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from posture.fallback import attempt
from posture.policy import ProbePolicy
from posture.policy import policy as default_policy


class PackageSource(Protocol):
    """Backend able to answer package manager queries.

    Implementations raise freely; :class:`PackageInventory` turns every fault
    into a safe default.
    """

    def list_packages(self) -> List[str]:
        ...

    def has_package(self, name: str) -> bool:
        ...

    def own_package(self) -> str:
        ...

    def signature(self, name: str) -> Optional[str]:
        ...

    def version_name(self, name: str) -> Optional[str]:
        ...

    def version_code(self, name: str) -> Optional[int]:
        ...

    def installer(self, name: str) -> Optional[str]:
        ...


@dataclass(frozen=True)
class AppMetadata:
    signature: Optional[str]
    version: Optional[str]
    build_number: Optional[str]


class PackageInventory:
    """Enumerate and look up installed packages without ever raising."""

    def __init__(self, source: PackageSource, policy: ProbePolicy | None = None) -> None:
        self.source = source
        self.policy = policy or default_policy

    def list_installed_packages(self) -> List[str]:
        """Return installed package ids in OS order, or ``[]`` on failure."""

        return attempt(
            lambda: list(self.source.list_packages()),
            [],
            label="list installed packages",
        ).value

    def is_installed(self, package_name: str) -> bool:
        if not package_name:
            return False
        return attempt(
            lambda: bool(self.source.has_package(package_name)),
            False,
            label=f"lookup {package_name}",
        ).value

    def app_signature(self) -> Optional[str]:
        return attempt(
            lambda: self.source.signature(self.source.own_package()),
            None,
            label="own signature",
        ).value

    def app_version(self) -> Optional[str]:
        return attempt(
            lambda: self.source.version_name(self.source.own_package()),
            None,
            label="own version",
        ).value

    def build_number(self) -> Optional[str]:
        def _read() -> Optional[str]:
            code = self.source.version_code(self.source.own_package())
            return None if code is None else str(code)

        return attempt(_read, None, label="own build number").value

    def own_app_metadata(self) -> AppMetadata:
        return AppMetadata(
            signature=self.app_signature(),
            version=self.app_version(),
            build_number=self.build_number(),
        )

    def installer(self) -> Optional[str]:
        return attempt(
            lambda: self.source.installer(self.source.own_package()),
            None,
            label="own installer",
        ).value

    def is_installed_from_trusted_store(self) -> bool:
        installer = self.installer()
        return installer is not None and installer in self.policy.trusted_installers


__all__ = ["AppMetadata", "PackageInventory", "PackageSource"]
