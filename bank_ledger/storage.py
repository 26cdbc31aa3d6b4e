"""
Snapshot Storage Module

Persists the full account map as numbered snapshot files named
``<base>.<N>`` and keeps at most ``max_versions`` of them. Loading walks the
versions newest first and returns the first one that decodes and whose every
key matches the id of the account stored under it.

Writes are plain overwrites: there is no locking between processes and no
write-then-rename, so a crash mid-save can leave a truncated newest version.
Such a version fails validation on the next load and an older one is used.

Monetary values are written as JSON numbers and read back as Decimal.
Integral amounts are written as integers, others as the nearest float, so
fractions with more than 17 significant digits are rounded on save.
Account keys must be plain ASCII decimal digits.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Union
import json
import re

from .accounts import Account
from .config import LedgerConfig, get_config
from .logging_config import get_logger, log_action


logger = get_logger(__name__)

DIGITS = re.compile(r"[0-9]+")


def _json_number(value):
    """json.dumps hook writing Decimal money as a JSON number"""
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class SnapshotError(Exception):
    """Base class for snapshot errors"""
    pass


class SnapshotFormatError(SnapshotError):
    """Snapshot content could not be decoded into an account map"""
    pass


@dataclass
class VersionCheck:
    """Result of reading and validating one snapshot version"""
    path: Path
    valid: bool
    accounts: Optional[Dict[int, Account]] = None
    reason: Optional[str] = None


@dataclass
class LoadReport:
    """What a load produced and which versions were passed over"""
    accounts: Dict[int, Account]
    source: Optional[Path] = None
    rejected: List[VersionCheck] = field(default_factory=list)

    @property
    def found_versions(self) -> bool:
        return self.source is not None or bool(self.rejected)


class SnapshotStore:
    """Numbered, rotating snapshot files in a single directory"""

    def __init__(
        self,
        directory: Union[str, Path] = ".",
        base_name: str = "accounts.json",
        max_versions: int = 3,
        legacy_numbering: bool = False
    ):
        if max_versions < 1:
            raise ValueError("max_versions must be at least 1")

        self.directory = Path(directory)
        self.base_name = base_name
        self.max_versions = max_versions
        # Legacy numbering: next suffix is the number of versions on disk and
        # "oldest" is the first filename in string order. Only collision-free
        # while suffixes never skip and share the same digit count.
        self.legacy_numbering = legacy_numbering

    @classmethod
    def from_config(cls, config: Optional[LedgerConfig] = None) -> 'SnapshotStore':
        """Create a store from application configuration"""
        config = config or get_config()
        return cls(
            directory=config.snapshot_dir,
            base_name=config.snapshot_base_name,
            max_versions=config.max_snapshot_versions,
            legacy_numbering=config.legacy_version_numbering
        )

    def version_number(self, path: Path) -> Optional[int]:
        """Numeric suffix of a snapshot path, or None if it is not one"""
        prefix = self.base_name + "."
        name = path.name
        if not name.startswith(prefix):
            return None
        suffix = name[len(prefix):]
        if not DIGITS.fullmatch(suffix):
            return None
        return int(suffix)

    def discover(self) -> List[Path]:
        """Existing snapshot versions, oldest first"""
        if not self.directory.is_dir():
            return []

        versions = [
            path for path in self.directory.iterdir()
            if path.is_file() and self.version_number(path) is not None
        ]
        if self.legacy_numbering:
            return sorted(versions, key=lambda p: p.name)
        return sorted(versions, key=self.version_number)

    def _new_version_path(self, versions: List[Path]) -> Path:
        if self.legacy_numbering:
            number = len(versions)
        elif versions:
            number = max(self.version_number(p) for p in versions) + 1
        else:
            number = 0
        return self.directory / f"{self.base_name}.{number}"

    def save(self, accounts: Dict[int, Account]) -> Path:
        """
        Write the account map as a new snapshot version

        The oldest versions are deleted first so that at most max_versions
        remain after the write. Filesystem errors propagate.

        Returns:
            Path of the version written
        """
        versions = self.discover()
        new_path = self._new_version_path(versions)
        payload = self.encode(accounts)

        while len(versions) >= self.max_versions:
            oldest = versions.pop(0)
            oldest.unlink()
            log_action(logger, "info", f"Removed oldest snapshot version {oldest.name}",
                       action="rotate_snapshot", resource=str(oldest))

        self.directory.mkdir(parents=True, exist_ok=True)
        new_path.write_text(payload, encoding="utf-8")

        log_action(logger, "info", f"Saved {len(accounts)} accounts to {new_path.name}",
                   action="save_snapshot", resource=str(new_path))
        return new_path

    def encode(self, accounts: Dict[int, Account]) -> str:
        """Serialize an account map to snapshot text"""
        return json.dumps(
            {str(key): accounts[key].to_dict() for key in sorted(accounts)},
            indent=2,
            default=_json_number
        )

    def decode(self, text: str) -> Dict[int, Account]:
        """
        Deserialize snapshot text into an account map

        Keys are parsed independently of the stored ids; whether they agree
        is checked by read_version. Leading zeros are accepted ("01" is 1),
        but two keys naming the same id are not.

        Raises:
            SnapshotFormatError: If the text is not a valid account map
        """
        try:
            data = json.loads(text, parse_float=Decimal)
        except ValueError as e:
            raise SnapshotFormatError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SnapshotFormatError(
                f"Snapshot must be an object, got {type(data).__name__}"
            )

        accounts: Dict[int, Account] = {}
        for key, record in data.items():
            if not DIGITS.fullmatch(key):
                raise SnapshotFormatError(f"Invalid account key {key!r}")
            account_id = int(key)
            if account_id in accounts:
                raise SnapshotFormatError(f"Duplicate account key {key!r}")

            try:
                accounts[account_id] = Account.from_dict(record)
            except KeyError as e:
                raise SnapshotFormatError(f"Account {key} is missing field {e}") from e
            except (ValueError, TypeError) as e:
                raise SnapshotFormatError(f"Account {key} is invalid: {e}") from e

        return accounts

    def read_version(self, path: Path) -> VersionCheck:
        """Read, decode and validate one snapshot version"""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return VersionCheck(path=path, valid=False, reason=f"Read failed: {e}")

        try:
            accounts = self.decode(text)
        except SnapshotFormatError as e:
            return VersionCheck(path=path, valid=False, reason=str(e))

        for key, account in accounts.items():
            if key != account.id:
                return VersionCheck(
                    path=path, valid=False,
                    reason=f"ID does not match dictionary key ({account.id} != {key})."
                )

        return VersionCheck(path=path, valid=True, accounts=accounts)

    def load_with_report(self) -> LoadReport:
        """Load the newest valid version and report the versions skipped"""
        versions = self.discover()
        if not versions:
            log_action(logger, "info", "No data files could be loaded.",
                       action="load_snapshot", resource=str(self.directory))
            return LoadReport(accounts={})

        report = LoadReport(accounts={})
        for path in reversed(versions):
            check = self.read_version(path)
            if check.valid:
                report.accounts = check.accounts
                report.source = path
                log_action(logger, "info",
                           f"Loaded {len(check.accounts)} accounts from {path.name}",
                           action="load_snapshot", resource=str(path))
                return report

            report.rejected.append(check)
            log_action(
                logger, "warning",
                f"An error occurred while loading accounts from {path}: {check.reason}",
                action="load_snapshot", resource=str(path)
            )

        log_action(logger, "error", "No valid snapshot version found; starting empty",
                   action="load_snapshot", resource=str(self.directory),
                   extra={"rejected": [c.path.name for c in report.rejected]})
        return report

    def load(self) -> Dict[int, Account]:
        """Account map from the newest valid version, empty if none"""
        return self.load_with_report().accounts
