"""Configuration management for Release Watch."""

import os
import sys
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

# Environment variables that override secrets from the config file
ENV_SLACK_TOKEN = "RELEASEWATCH_SLACK_TOKEN"
ENV_SMTP_PASSWORD = "RELEASEWATCH_SMTP_PASSWORD"
ENV_GITHUB_TOKEN = "RELEASEWATCH_GITHUB_TOKEN"

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "releasewatch" / "config.toml"


class ConfigError(Exception):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ApplicationConfig:
    """The deployed application being watched."""

    version: str = ""


@dataclass
class NotifyConfig:
    """Global switch and per-severity toggles."""

    enabled: bool = False
    major: bool = False
    minor: bool = False
    patch: bool = False


@dataclass
class FeedConfig:
    """Upstream release feed."""

    url: str = "https://api.github.com/repos/magento/magento2/releases"
    timeout: float = 5.0
    user_agent: str = "releasewatch-version-checker"
    unstable_marker: str = "develop"
    max_tag_length: int = 0  # 0 disables the length check
    github_token: str = ""


@dataclass
class EmailConfig:
    """Email channel configuration (SMTP)."""

    enabled: bool = False
    customer_email: str = ""
    developer_email: str = ""
    sender_email: str = ""
    sender_name: str = "Release Watch"
    template: str = "update_notify"
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: str = ""
    smtp_password: str = ""
    use_tls: bool = False
    contact_email: str = ""
    contact_website: str = ""


@dataclass
class SlackConfig:
    """Slack channel configuration."""

    enabled: bool = False
    token: str = ""
    username: str = "Release Watch"
    channel: str = ""


@dataclass
class MessagesConfig:
    """Message composition settings."""

    doc_host: str = "devdocs.magento.com"


@dataclass
class Config:
    """Main configuration."""

    application: ApplicationConfig = field(default_factory=ApplicationConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    email: EmailConfig = field(default_factory=EmailConfig)
    slack: SlackConfig = field(default_factory=SlackConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Create Config from dictionary.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        log_file = data.get("log_file")
        if log_file is not None and not isinstance(log_file, str):
            raise ConfigError(f"log_file: expected a path string, got {log_file!r}")

        return cls(
            application=_build_section(ApplicationConfig, "application", data),
            notify=_build_section(NotifyConfig, "notify", data),
            feed=_build_section(FeedConfig, "feed", data),
            email=_build_section(EmailConfig, "email", data),
            slack=_build_section(SlackConfig, "slack", data),
            messages=_build_section(MessagesConfig, "messages", data),
            log_file=Path(log_file) if log_file else None,
        )

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Look up a setting by dotted key, e.g. ``notify.patch``.

        Args:
            key: Dotted path of section and setting name.
            default: Returned when the key does not exist.

        Returns:
            The setting value, or ``default``.
        """
        node: Any = self
        for part in key.split("."):
            if not is_dataclass(node) or part not in {f.name for f in fields(node)}:
                return default
            node = getattr(node, part)
        return node

    def apply_env_overrides(self) -> None:
        """Fill secrets from the environment when they are set there."""
        self.slack.token = os.environ.get(ENV_SLACK_TOKEN, self.slack.token)
        self.email.smtp_password = os.environ.get(
            ENV_SMTP_PASSWORD, self.email.smtp_password
        )
        self.feed.github_token = os.environ.get(ENV_GITHUB_TOKEN, self.feed.github_token)


_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


def _coerce(section: str, name: str, expected: type, value: Any) -> Any:
    """Check ``value`` against the field type, converting boolean strings."""
    key = f"{section}.{name}"

    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS:
            return True
        if isinstance(value, str) and value.strip().lower() in _FALSE_STRINGS:
            return False
        raise ConfigError(f"{key}: expected a boolean, got {value!r}")

    if expected is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        raise ConfigError(f"{key}: expected an integer, got {value!r}")

    if expected is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise ConfigError(f"{key}: expected a number, got {value!r}")

    if not isinstance(value, expected):
        raise ConfigError(f"{key}: expected {expected.__name__}, got {value!r}")
    return value


def _build_section(section_cls: type, section: str, data: dict) -> Any:
    """Build one config section, rejecting unknown keys and mistyped values."""
    values = data.get(section, {})
    if not isinstance(values, dict):
        raise ConfigError(f"[{section}] must be a table, got {values!r}")

    types = {f.name: f.type for f in fields(section_cls)}
    unknown = sorted(set(values) - set(types))
    if unknown:
        raise ConfigError(f"[{section}] unknown setting(s): {', '.join(unknown)}")

    return section_cls(
        **{name: _coerce(section, name, types[name], value) for name, value in values.items()}
    )


def load_config(path: Path) -> Config:
    """
    Load configuration from TOML file.

    Secrets may also come from the environment or a ``.env`` file.

    Args:
        path: Path to config file.

    Returns:
        Config object (defaults if file doesn't exist).

    Raises:
        ConfigError: If the file exists but is not valid.
    """
    load_dotenv()

    if not path.exists():
        config = Config()
    else:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Cannot parse {path}: {e}") from e
        config = Config.from_dict(data)

    config.apply_env_overrides()
    return config


def get_default_config_toml() -> str:
    """Return default configuration as TOML string."""
    return '''# Release Watch Configuration

[application]
version = "2.4.5"     # Currently deployed version (or pass --current-version)

[notify]
enabled = true
major = true          # Notify when the major.minor prefix differs
minor = false         # Notify when the X.Y.Z prefix differs
patch = false         # Notify on any difference at all

[feed]
url = "https://api.github.com/repos/magento/magento2/releases"
timeout = 5.0
unstable_marker = "develop"
max_tag_length = 0    # Set to 5 to ignore tags like "2.4.6-p1"
# github_token = ""   # Or RELEASEWATCH_GITHUB_TOKEN

[email]
enabled = false
customer_email = ""
developer_email = ""
sender_email = "store@example.com"
sender_name = "Release Watch"
template = "update_notify"
smtp_host = "localhost"
smtp_port = 25
use_tls = false
# smtp_username = ""
# smtp_password = ""  # Or RELEASEWATCH_SMTP_PASSWORD
contact_email = ""
contact_website = ""

# Slack notifications (optional)
# Create a bot token at https://api.slack.com/apps
[slack]
enabled = false
# token = "xoxb-..."  # Or RELEASEWATCH_SLACK_TOKEN
username = "Release Watch"
channel = "#ops"

[messages]
doc_host = "devdocs.magento.com"

# Uncomment to enable file logging
# log_file = "~/.local/share/releasewatch/releasewatch.log"
'''
