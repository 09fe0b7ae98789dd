import shlex
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

import gifnoc

# Pseudo-users created by the storage layer itself, never sent to the lookup
SPECIAL_IDENTIFIERS = ("tmp", "snapshots", "tombstone")


class ConfigurationError(Exception):
    pass


@dataclass
class ReportConfig:
    # pylint: disable=too-many-instance-attributes

    max_users: int = 30
    special_identifiers: list[str] = field(
        default_factory=lambda: list(SPECIAL_IDENTIFIERS)
    )
    # Every category under this prefix is a dataset owned by the object store
    dataset_prefix: str = "/manta"
    # The crash-dump bucket is collected in kilobytes, the pool totals in bytes
    crash_category: str = "/var/crash"
    crash_unit_factor: int = 1024
    used_category: str = "zones:used"
    avail_category: str = "zones:avail"

    def __post_init__(self):
        if self.max_users < 1:
            raise ConfigurationError(
                f"max_users must be at least 1, got {self.max_users}"
            )


@dataclass
class LookupConfig:
    command: str = "sdc-ldap search uuid={identifier}"
    host: str = "localhost"
    sshconfig: Path | None = None

    def __post_init__(self):
        if "{identifier}" not in self.command:
            raise ConfigurationError(
                f"Lookup command '{self.command}' has no {{identifier}} placeholder"
            )

    def format(self, identifier: str) -> str:
        # Identifiers come straight from the dumps, never let the shell interpret them
        return self.command.format(identifier=shlex.quote(identifier))

    @property
    def is_local(self) -> bool:
        return self.host == "localhost"

    @cached_property
    def ssh(self):
        from fabric import Config as FabricConfig
        from fabric import Connection
        from paramiko import SSHConfig

        if self.sshconfig is None:
            fconfig = FabricConfig()
        else:
            fconfig = FabricConfig(ssh_config=SSHConfig.from_path(self.sshconfig))
        fconfig["run"]["pty"] = False
        fconfig["run"]["in_stream"] = False
        return Connection(self.host, config=fconfig)


@dataclass
class LoggingConfig:
    log_level: str = "WARNING"
    OTLP_endpoint: str | None = None
    # Only used when OTLP_endpoint is set
    service_name: str = "storage-report"


@dataclass
class Config:
    report: ReportConfig = field(default_factory=ReportConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    logging: LoggingConfig | None = None


full_config = gifnoc.define("storage_report", Config)


gifnoc.set_sources("${envfile:STORAGE_REPORT_CONFIG}")


def config() -> Config:
    return full_config
