"""
Package Manager - Queries Android's package and activity managers.

Wraps the shell tools available inside Termux:
  - pm list packages       installed third-party packages
  - pm resolve-activity    default launch activity of a package
  - pm path + aapt         human-readable application label
  - am start               launch an activity

Every call is synchronous and may block for as long as the external
process runs. Failures are raised as ExternalQueryError; deciding whether
a failure is fatal is left to the caller.
"""

import shutil
import subprocess
import time
from enum import Enum
from typing import List, Optional

from loguru import logger

from txlaunch.errors import ExternalQueryError, LaunchError
from txlaunch.services.catalog import NO_LABEL, Entry


PM = "/system/bin/pm"
GETPROP = "/system/bin/getprop"
AAPT = "aapt"
USER = "0"


class AmVariant(str, Enum):
    """Activity manager used to start apps."""

    OLD = "old"          # termux am, slow but always present
    SYSTEM = "system"    # /system/bin/am, fast, broken on Android 11+
    NEW = "new"          # termux-am from newer Termux builds

    @property
    def command(self) -> str:
        return {
            AmVariant.OLD: "am",
            AmVariant.SYSTEM: "/system/bin/am",
            AmVariant.NEW: "termux-am",
        }[self]


class PackageManager:
    """Blocking wrapper around pm, aapt and am."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def _run(self, args: List[str]) -> str:
        """Run a command and return its stdout, raising on any failure."""
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ExternalQueryError(f"Command not found: {args[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ExternalQueryError(
                f"Command timed out after {self.timeout}s: {' '.join(args)}"
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise ExternalQueryError(
                f"`{' '.join(args)}` exited with {result.returncode}: {stderr}"
            )
        return result.stdout

    def list_installed_packages(self) -> List[str]:
        """
        List installed third-party packages.

        Returns:
            Package ids in the order pm reports them

        Raises:
            ExternalQueryError: pm failed; the catalog cannot be built without it
        """
        output = self._run([PM, "list", "packages", "--user", USER, "-3"])

        packages = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            if line.startswith("package:"):
                line = line[len("package:"):]
            packages.append(line)
        return packages

    def resolve_default_intent(self, package_id: str) -> Optional[str]:
        """Return the component name of the package's launcher activity, if any."""
        output = self._run([PM, "resolve-activity", "--user", USER, package_id])

        for line in output.splitlines():
            if "name=" in line:
                return line.replace("name=", "").strip()
        return None

    def apk_path(self, package_id: str) -> str:
        """Return the path of the package's base APK."""
        output = self._run([PM, "path", "--user", USER, package_id])

        for line in output.splitlines():
            line = line.strip()
            if line.startswith("package:"):
                return line[len("package:"):]
        raise ExternalQueryError(f"No APK path reported for {package_id}")

    def extract_label(self, package_id: str) -> str:
        """
        Read the application label from the package's APK.

        This is the expensive query: aapt parses the whole manifest.

        Returns:
            The label, or "No Label" if the manifest declares none or an
            empty one
        """
        output = self._run([AAPT, "dump", "badging", self.apk_path(package_id)])

        for line in output.splitlines():
            if "application-label:" in line:
                label = line.replace("application-label:", "").replace("'", "").strip()
                return label or NO_LABEL
        return NO_LABEL

    def launch(self, entry: Entry, variant: AmVariant) -> int:
        """
        Start an app through the selected activity manager.

        Args:
            entry: Catalog entry to launch
            variant: Which am binary to invoke

        Returns:
            Elapsed time in milliseconds

        Raises:
            LaunchError: am exited non-zero or could not be run
        """
        component = f"{entry.package_id}/{entry.intent or 'none'}"
        args = [variant.command, "start", "--user", USER, component]

        logger.debug(f"Launching {component} via {variant.command}")
        started = time.monotonic()
        try:
            self._run(args)
        except ExternalQueryError as e:
            raise LaunchError(str(e)) from e
        return int((time.monotonic() - started) * 1000)

    def ensure_aapt(self) -> None:
        """Install aapt through apt if it is not on PATH."""
        if shutil.which(AAPT):
            return

        logger.info("aapt not found, installing it with apt")
        self._run(["apt", "install", AAPT, "-y"])

    def sdk_version(self) -> Optional[int]:
        """Return the Android SDK level, or None if it cannot be determined."""
        try:
            output = self._run([GETPROP, "ro.build.version.sdk"])
        except ExternalQueryError:
            logger.warning("Could not read the Android SDK version")
            return None

        try:
            return int(output.strip())
        except ValueError:
            return None


# Singleton accessor
_package_manager_instance = None


def get_package_manager() -> PackageManager:
    """
    Get the shared PackageManager instance.

    Returns:
        PackageManager: The global instance
    """
    global _package_manager_instance
    if _package_manager_instance is None:
        _package_manager_instance = PackageManager()
    return _package_manager_instance
