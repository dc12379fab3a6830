"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Every key is
optional and falls back to a default. Values are validated on construction so
malformed input is reported before any resource is declared. Used by
__main__.main() to build the KiteStack component.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi

ARCHITECTURES: tuple[str, ...] = ("x86_64", "arm64")
RUNTIMES: tuple[str, ...] = ("provided.al2", "provided.al2023", "java17", "java21")


class InvalidConfigError(pulumi.RunError):
    """Stack configuration is malformed or contradictory."""


def _get_str(config: pulumi.Config, key: str, default: Any) -> Any:
    value = config.get(key)
    return default if value is None else value


def _get_int(config: pulumi.Config, key: str, default: Any) -> Any:
    value = config.get_int(key)
    return default if value is None else value


def _get_bool(config: pulumi.Config, key: str, default: Any) -> Any:
    value = config.get_bool(key)
    return default if value is None else value


# (key, parser, default); parser receives (config, key, default) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str, Any], Any], Any]] = [
    ("domain_name", _get_str, None),
    ("architecture", _get_str, "x86_64"),
    ("runtime", _get_str, "provided.al2"),
    ("handler", _get_str, "hello.handler"),
    ("memory_size", _get_int, 256),
    ("function_archive", _get_str, "../k1te-serverless/target/function.zip"),
    ("lifecycle_handler_dir", _get_str, "lifecycle_handler"),
    ("point_in_time_recovery", _get_bool, False),
    ("protect_tables", _get_bool, False),
    ("log_retention_days", _get_int, 14),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        domain_name: Custom domain for the front doors (ws.<domain>,
            api.<domain>). None disables DNS, certificate and domain bindings.
        architecture: Instruction set of the request dispatcher Lambda.
        runtime: Lambda runtime of the request dispatcher.
        handler: Entry point of the request dispatcher.
        memory_size: Memory of the request dispatcher in MB.
        function_archive: Path of the request dispatcher bundle (zip file).
        lifecycle_handler_dir: Directory with the lifecycle handler sources.
        point_in_time_recovery: Enable DynamoDB point-in-time recovery.
        protect_tables: Protect the DynamoDB tables from deletion.
        log_retention_days: CloudWatch log retention for both Lambdas.
    """

    domain_name: str | None = None
    architecture: str = "x86_64"
    runtime: str = "provided.al2"
    handler: str = "hello.handler"
    memory_size: int = 256
    function_archive: str = "../k1te-serverless/target/function.zip"
    lifecycle_handler_dir: str = "lifecycle_handler"
    point_in_time_recovery: bool = False
    protect_tables: bool = False
    log_retention_days: int = 14

    def __post_init__(self):
        if self.domain_name is not None and not self.domain_name.strip():
            raise InvalidConfigError(
                "domain_name is set but empty; unset it to disable the custom domain"
            )
        if self.architecture not in ARCHITECTURES:
            raise InvalidConfigError(
                f"architecture must be one of {ARCHITECTURES}, got {self.architecture!r}"
            )
        if self.runtime not in RUNTIMES:
            raise InvalidConfigError(
                f"runtime must be one of {RUNTIMES}, got {self.runtime!r}"
            )
        if not self.handler.strip():
            raise InvalidConfigError("handler must not be empty")
        if self.memory_size <= 0:
            raise InvalidConfigError(
                f"memory_size must be a positive number of MB, got {self.memory_size}"
            )
        if self.log_retention_days <= 0:
            raise InvalidConfigError(
                f"log_retention_days must be positive, got {self.log_retention_days}"
            )

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). Keys missing from the stack
        config take the defaults listed in _CONFIG_SPEC.
        """
        kwargs = {key: parser(config, key, default) for key, parser, default in _CONFIG_SPEC}
        return cls(**kwargs)
