"""Core domain types and logic."""

from .actions import Action, ActionResult, parse_action
from .config import Config, ConfigError, load_config, load_config_or_default
from .errors import ErrorCode, GitError, RepositoryUnavailable, ScanError
from .ignore import IgnoreRuleSet
from .models import CommitInfo, HistorySummary, RepoStatus, VerboseDetails
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # actions
    "Action",
    "ActionResult",
    "parse_action",
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_config_or_default",
    # errors
    "ErrorCode",
    "GitError",
    "RepositoryUnavailable",
    "ScanError",
    # ignore
    "IgnoreRuleSet",
    # models
    "CommitInfo",
    "HistorySummary",
    "RepoStatus",
    "VerboseDetails",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
