from __future__ import annotations


class PkgDialogError(Exception):
    """Base class for all pkgdialog errors."""


class ConfigMissing(PkgDialogError):
    """The package catalog could not be found or read."""


class InvalidCatalog(ConfigMissing):
    """The catalog file exists but its content is unusable."""


class PrerequisiteMissing(PkgDialogError):
    """A tool or environment the installer depends on is absent."""


class BackendUnavailable(PkgDialogError):
    """An installation backend could not be made available."""


class InstallFailure(PkgDialogError):
    def __init__(self, backend: str, failed: list[str], message: str):
        super().__init__(message)
        self.backend = backend
        self.failed = failed
