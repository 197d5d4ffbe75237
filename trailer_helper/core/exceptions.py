# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import Optional


class TrailerHelperError(Exception):
    """Base class for all trailer helper exceptions."""


class ConfigError(TrailerHelperError):
    """The configuration file is missing or invalid."""


class CatalogError(TrailerHelperError):
    """The library catalog could not be queried."""


class ProviderIdError(TrailerHelperError, ValueError):
    """A serialized provider id value could not be decoded."""


class TaskCancelledError(TrailerHelperError):
    """A running task noticed its cancel signal between items."""

    def __init__(self, message: str = "Task cancelled", report: Optional[object] = None):
        super().__init__(message)
        self.report = report
