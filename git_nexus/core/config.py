"""Typed configuration loading.

Configuration is a small TOML file:

    scan_depth = 3
    ignore_dirs = ["node_modules", "target"]
    use_gitignore = false
    max_workers = 8

    [display]
    default_verbose = false
    show_hooks = false
    show_branch = true

Lookup order when no explicit path is given: ./.git-nexus.toml, the user
config directory's config.toml, then ~/.git-nexus.toml.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from git_nexus.platform.files import atomic_write_text
from git_nexus.platform.paths import home, user_config_dir

from .ignore import IgnoreRuleSet
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DEFAULT_IGNORE_DIRS",
    "DEFAULT_SCAN_DEPTH",
    "DisplayConfig",
    "LOCAL_CONFIG_NAME",
    "config_search_paths",
    "find_config",
    "load_config",
    "load_config_or_default",
    "render_example_config",
    "write_example_config",
]

DEFAULT_SCAN_DEPTH = 3

DEFAULT_IGNORE_DIRS: tuple[str, ...] = (
    "node_modules",
    "target",
    "venv",
    ".build",
    "build",
    "dist",
    ".next",
)

LOCAL_CONFIG_NAME = ".git-nexus.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    """Output defaults, overridable per command."""

    default_verbose: bool = False
    show_hooks: bool = False
    show_branch: bool = True


@dataclass(frozen=True, slots=True)
class Config:
    """Scanner configuration.

    Attributes:
        scan_depth: Directory levels below the root to search (>= 1)
        ignore_dirs: Ignore patterns applied while walking
        use_gitignore: Also apply the scan root's .gitignore
        max_workers: Worker pool size, None for the pool default
        display: Output defaults
    """

    scan_depth: int = DEFAULT_SCAN_DEPTH
    ignore_dirs: tuple[str, ...] = DEFAULT_IGNORE_DIRS
    use_gitignore: bool = False
    max_workers: int | None = None
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from parsed TOML.

        Raises:
            TypeError: A key has the wrong type
            ValueError: A value is out of range
        """
        display: StrDict = get_table(data, "display") or {}

        scan_depth = get_int(data, "scan_depth")
        if scan_depth is not None and scan_depth < 1:
            raise ValueError("'scan_depth' must be a positive integer")

        max_workers = get_int(data, "max_workers")
        if max_workers is not None and max_workers < 1:
            raise ValueError("'max_workers' must be a positive integer")

        ignore_dirs = get_str_list(data, "ignore_dirs")

        return cls(
            scan_depth=scan_depth if scan_depth is not None else DEFAULT_SCAN_DEPTH,
            ignore_dirs=tuple(ignore_dirs) if ignore_dirs is not None else DEFAULT_IGNORE_DIRS,
            use_gitignore=bool(get_bool(data, "use_gitignore")),
            max_workers=max_workers,
            display=DisplayConfig(
                default_verbose=bool(get_bool(display, "default_verbose")),
                show_hooks=bool(get_bool(display, "show_hooks")),
                show_branch=_default_true(get_bool(display, "show_branch")),
            ),
        )

    def ignore_rules(self, root: Path | None = None) -> IgnoreRuleSet:
        """Rule set for a scan of `root`."""
        rules = IgnoreRuleSet.from_patterns(self.ignore_dirs)
        if self.use_gitignore and root is not None:
            rules = rules.extend(IgnoreRuleSet.from_repo(root))
        return rules


def _default_true(value: bool | None) -> bool:
    return True if value is None else value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling import and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and validate configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def config_search_paths(cwd: Path | None = None) -> list[Path]:
    base = cwd if cwd is not None else Path.cwd()
    return [
        base / LOCAL_CONFIG_NAME,
        user_config_dir() / "config.toml",
        home() / LOCAL_CONFIG_NAME,
    ]


def find_config(cwd: Path | None = None) -> Path | None:
    """Return the first existing config file in lookup order."""
    for candidate in config_search_paths(cwd):
        if candidate.is_file():
            return candidate
    return None


def load_config_or_default(path: Path | None = None) -> Result[Config, ConfigError]:
    """Load `path`, or the discovered config, or defaults when there is none.

    A config file that exists but is invalid is still an error.
    """
    target = path if path is not None else find_config()
    if target is None:
        return Ok(Config())
    return load_config(target)


def render_example_config(config: Config | None = None) -> str:
    """TOML text for `config` (defaults when None)."""
    cfg = config or Config()
    ignore = ", ".join(f'"{name}"' for name in cfg.ignore_dirs)
    lines = [
        "# git-nexus configuration",
        "",
        "# Directory levels below the scan root to search",
        f"scan_depth = {cfg.scan_depth}",
        "",
        "# Ignore patterns applied while walking (gitignore-like subset)",
        f"ignore_dirs = [{ignore}]",
        "",
        "# Also apply the scan root's .gitignore",
        f"use_gitignore = {_toml_bool(cfg.use_gitignore)}",
    ]
    if cfg.max_workers is not None:
        lines += ["", f"max_workers = {cfg.max_workers}"]
    lines += [
        "",
        "[display]",
        f"default_verbose = {_toml_bool(cfg.display.default_verbose)}",
        f"show_hooks = {_toml_bool(cfg.display.show_hooks)}",
        f"show_branch = {_toml_bool(cfg.display.show_branch)}",
        "",
    ]
    return "\n".join(lines)


def _toml_bool(value: bool) -> str:
    return "true" if value else "false"


def write_example_config(path: Path, *, overwrite: bool = False) -> Result[Path, ConfigError]:
    """Write the default configuration to `path`."""
    if path.exists() and not overwrite:
        return Err(ConfigError(f"Config file already exists: {path}", path=path))
    try:
        atomic_write_text(path, render_example_config())
    except OSError as e:
        return Err(ConfigError(f"Could not write config: {e}", path=path))
    return Ok(path)
