from __future__ import annotations
import logging
import os
import tempfile
from typing import List, Optional, Sequence, Tuple

from .arch import CommandRunner
from .errors import BackendUnavailable
from .models import Backend, BackendHandle, InstallPlan, InstallResult

logger = logging.getLogger(__name__)

AUR_HELPERS = ("paru", "yay")
PARU_BIN_GIT = "https://aur.archlinux.org/paru-bin.git"

def pacman_install_cmd(pkgs: Sequence[str], *, noconfirm: bool = False) -> List[str]:
    cmd = ["sudo", "pacman", "-S", "--needed"]
    if noconfirm:
        cmd.append("--noconfirm")
    return cmd + list(pkgs)

def split_flatpak_ref(app: str, default_remote: str = "flathub") -> Tuple[str, str]:
    if ":" in app:
        remote, _, app_id = app.partition(":")
        return (remote or default_remote), app_id
    return default_remote, app

# ---------- repository ----------
class RepoBackend:
    backend = Backend.REPO

    def __init__(self, runner: CommandRunner, *, noconfirm: bool = False):
        self.runner = runner
        self.noconfirm = noconfirm

    def install(self, pkgs: Sequence[str]) -> InstallResult:
        pkgs = list(pkgs)
        if not pkgs:
            return InstallResult(self.backend, [])
        print(f"Installing with pacman: {' '.join(pkgs)}")
        rc = self.runner.call(pacman_install_cmd(pkgs, noconfirm=self.noconfirm), action="pacman")
        if rc != 0:
            return InstallResult(self.backend, pkgs, failed=pkgs, message=f"pacman exited with code {rc}.")
        return InstallResult(self.backend, pkgs, message=f"pacman: {len(pkgs)} package(s) done.")

# ---------- AUR helper provisioning ----------
class RepoProvision:
    """Install the helper from the configured repositories (e.g. chaotic-aur)."""

    name = "repository"

    def __init__(self, helper: str = "paru"):
        self.helper = helper

    def provision(self, runner: CommandRunner) -> Optional[str]:
        rc = runner.call(pacman_install_cmd([self.helper], noconfirm=True), action="aur-helper")
        if rc == 0 and (runner.dry_run or runner.which(self.helper)):
            return self.helper
        return None

class SourceBuildProvision:
    """Build the helper with makepkg in a scratch directory that is always removed."""

    name = "source build"

    def __init__(self, helper: str = "paru", pkgbase: str = "paru-bin", git_url: str = PARU_BIN_GIT):
        self.helper = helper
        self.pkgbase = pkgbase
        self.git_url = git_url

    def provision(self, runner: CommandRunner) -> Optional[str]:
        # toolchain is best-effort; a failure shows up in the build itself
        runner.call(pacman_install_cmd(["base-devel", "git"], noconfirm=True), action="aur-helper")
        with tempfile.TemporaryDirectory(prefix="pkgdialog-") as tmpdir:
            src = os.path.join(tmpdir, self.pkgbase)
            rc = runner.call(["git", "clone", self.git_url, src], action="aur-helper")
            if rc == 0:
                rc = runner.call(["makepkg", "-si", "--noconfirm"], action="aur-helper", cwd=src)
        if rc == 0 and (runner.dry_run or runner.which(self.helper)):
            return self.helper
        return None

def default_provisioners() -> list:
    return [RepoProvision("paru"), SourceBuildProvision("paru")]

class AurBackend:
    backend = Backend.AUR

    def __init__(self, runner: CommandRunner, handle: BackendHandle, provisioners: Optional[list] = None):
        self.runner = runner
        self.handle = handle
        self.provisioners = default_provisioners() if provisioners is None else provisioners

    def probe(self) -> Optional[str]:
        for helper in AUR_HELPERS:
            if self.runner.which(helper):
                return helper
        return None

    def ensure_helper(self) -> str:
        if self.handle.aur_helper and self.runner.which(self.handle.aur_helper):
            return self.handle.aur_helper
        helper = self.probe()
        if helper is None:
            print("No AUR helper found. Installing paru...")
            for strategy in self.provisioners:
                logger.info("Trying AUR helper provisioning: %s", strategy.name)
                helper = strategy.provision(self.runner)
                if helper:
                    break
                logger.warning("AUR helper provisioning via %s failed", strategy.name)
        if not helper:
            raise BackendUnavailable("No AUR helper (paru/yay) available and installing paru failed.")
        self.handle.aur_helper = helper
        return helper

    def install(self, pkgs: Sequence[str]) -> InstallResult:
        pkgs = list(pkgs)
        if not pkgs:
            return InstallResult(self.backend, [])
        helper = self.ensure_helper()
        print(f"Installing with {helper} (AUR): {' '.join(pkgs)}")
        rc = self.runner.call([helper, "-S", "--needed", *pkgs], action=helper)
        if rc != 0:
            return InstallResult(self.backend, pkgs, failed=pkgs, message=f"{helper} exited with code {rc}.")
        return InstallResult(self.backend, pkgs, message=f"{helper}: {len(pkgs)} package(s) done.")

# ---------- flatpak ----------
class FlatpakBackend:
    backend = Backend.FLATPAK

    def __init__(
        self,
        runner: CommandRunner,
        handle: BackendHandle,
        *,
        remote: str = "flathub",
        remote_url: str = "https://flathub.org/repo/flathub.flatpakrepo",
    ):
        self.runner = runner
        self.handle = handle
        self.remote = remote
        self.remote_url = remote_url

    def ensure_flatpak(self) -> bool:
        if self.runner.which("flatpak"):
            return True
        print("Installing flatpak...")
        rc = self.runner.call(pacman_install_cmd(["flatpak"], noconfirm=True), action="flatpak")
        if rc != 0:
            return False
        self.handle.flatpak_installed = True
        return True

    def remotes(self) -> List[str]:
        rc, out = self.runner.capture(["flatpak", "remotes", "--columns=name"])
        if rc != 0:
            return []
        return [ln.split()[0] for ln in out.splitlines() if ln.strip()]

    def ensure_remote(self) -> bool:
        if self.remote in self.remotes():
            return True
        rc = self.runner.call(
            ["flatpak", "remote-add", "--if-not-exists", self.remote, self.remote_url],
            action="flatpak",
        )
        return rc == 0

    def install(self, apps: Sequence[str]) -> InstallResult:
        apps = list(apps)
        if not apps:
            return InstallResult(self.backend, [])
        if not self.ensure_flatpak():
            return InstallResult(self.backend, apps, failed=apps, message="Failed to install flatpak.")
        if not self.ensure_remote():
            # apps from other remotes may still work
            logger.warning("Could not register remote %s", self.remote)

        print(f"Installing with flatpak: {' '.join(apps)}")
        failed: List[str] = []
        for app in apps:
            remote, app_id = split_flatpak_ref(app, self.remote)
            rc = self.runner.call(["flatpak", "install", "-y", remote, app_id], action="flatpak")
            if rc != 0:
                failed.append(app)
        done = len(apps) - len(failed)
        msg = f"flatpak: {done}/{len(apps)} app(s) done."
        if failed:
            msg += " Failed: " + ", ".join(failed)
        return InstallResult(self.backend, apps, failed=failed, message=msg)

# ---------- orchestration ----------
class Installer:
    """Runs the backends in fixed order; a failing backend never stops the next one."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        handle: Optional[BackendHandle] = None,
        noconfirm: bool = False,
        sync_before_install: bool = True,
        flatpak_remote: str = "flathub",
        flatpak_remote_url: str = "https://flathub.org/repo/flathub.flatpakrepo",
        provisioners: Optional[list] = None,
    ):
        self.runner = runner
        self.handle = handle or BackendHandle()
        self.sync_before_install = sync_before_install
        self.repo = RepoBackend(runner, noconfirm=noconfirm)
        self.aur = AurBackend(runner, self.handle, provisioners)
        self.flatpak = FlatpakBackend(runner, self.handle, remote=flatpak_remote, remote_url=flatpak_remote_url)

    def sync_databases(self) -> None:
        print("Syncing package databases...")
        rc = self.runner.call(["sudo", "pacman", "-Sy"], action="sync")
        if rc != 0:
            logger.warning("Database sync failed (rc=%d), continuing", rc)

    def run(self, install_plan: InstallPlan) -> List[InstallResult]:
        if install_plan.total == 0:
            return []
        if self.sync_before_install and (install_plan.repo or install_plan.aur):
            self.sync_databases()

        results: List[InstallResult] = []
        for backend in (self.repo, self.aur, self.flatpak):
            pkgs = list(install_plan.for_backend(backend.backend))
            if not pkgs:
                continue
            try:
                res = backend.install(pkgs)
            except BackendUnavailable as e:
                logger.error("%s backend unavailable: %s", backend.backend.value, e)
                res = InstallResult(backend.backend, pkgs, failed=pkgs, message=str(e))
            except OSError as e:
                logger.error("%s backend failed: %s", backend.backend.value, e)
                res = InstallResult(backend.backend, pkgs, failed=pkgs, message=f"{backend.backend.value} failed: {e}")
            logger.info("%s: %s", backend.backend.value, res.message)
            results.append(res)
        return results

    def reboot(self) -> int:
        print("Rebooting...")
        return self.runner.call(["sudo", "systemctl", "reboot"], action="reboot")
