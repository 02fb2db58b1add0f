"""Typed runtime settings with dotenv support and startup validation."""

from enum import Enum

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from deploy_check.domain import DeployTarget, LabelMatchMode, TimeoutBudget


class ConfigurationError(ValueError):
    """Raised when runtime settings cannot be loaded or validated."""


class CheckMode(str, Enum):
    """Status query variant selecting the adapter and evaluation policy pair."""

    ENVIRONMENT = "environment"
    VERSION = "version"


class CheckSettings(BaseSettings):
    """Deploy check settings sourced from init overrides, environment, and dotenv.

    Environment variable names are the uppercase field names prefixed with
    `PLUGIN_`. Example: `version_label` reads from `PLUGIN_VERSION_LABEL`.

    Attributes:
        access_key: Optional static AWS access key id.
        secret_key: Optional static AWS secret access key.
        application: Beanstalk application name.
        environment: Optional environment name; empty checks all environments.
        version_label: Expected deployed version label.
        region: AWS region.
        timeout: Deploy timeout in minutes.
        tick: Poll interval in seconds.
        debug: Enable debug-level per-tick logging.
        label_match: Version label comparison mode.
        check_mode: Environment-status or application-version polling.
        poll_immediately: Poll once on entry instead of after the first interval.
        request_timeout_seconds: Connect and read timeout for each API request.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    access_key: str | None = Field(default=None)
    secret_key: str | None = Field(default=None, repr=False)
    application: str = Field(min_length=1)
    environment: str = Field(default="")
    version_label: str = Field(min_length=1)
    region: str = Field(default="us-east-1", min_length=1)
    timeout: int = Field(default=30, gt=0)
    tick: int = Field(default=20, gt=0)
    debug: bool = Field(default=False)
    label_match: LabelMatchMode = Field(default=LabelMatchMode.EXACT)
    check_mode: CheckMode = Field(default=CheckMode.ENVIRONMENT)
    poll_immediately: bool = Field(default=False)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("application", "version_label", "region")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return value.strip()

    def settings_build_target(self) -> DeployTarget:
        """Build the immutable deploy target from validated settings.

        Returns:
            DeployTarget: Target for one check run.

        Raises:
            ValueError: Raised when target invariants fail.
        """

        return DeployTarget(
            application=self.application,
            environment_selector=self.environment,
            expected_version_label=self.version_label,
            region=self.region,
        )

    def settings_build_budget(self) -> TimeoutBudget:
        """Build the timeout budget with minutes and seconds converted to seconds.

        Returns:
            TimeoutBudget: Total duration and tick interval in seconds.

        Raises:
            ValueError: Raised when budget values are not positive.
        """

        return TimeoutBudget(total_seconds=float(self.timeout * 60), tick_seconds=float(self.tick))

    def settings_use_static_credentials(self) -> bool:
        return bool(self.access_key) and bool(self.secret_key)


def config_load_settings(overrides: dict[str, object] | None = None) -> CheckSettings:
    """Load and validate deploy check settings.

    Args:
        overrides: Optional field values taking precedence over environment and dotenv.

    Returns:
        CheckSettings: Validated settings object.

    Raises:
        ConfigurationError: Raised when required settings are missing or invalid.
    """

    try:
        return CheckSettings(**(overrides or {}))
    except ValidationError as error:
        raise ConfigurationError(
            f"Deploy check configuration validation failed. Update flags or PLUGIN_* variables. Details: {error}"
        ) from error
