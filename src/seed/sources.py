# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Install Destinations

Single responsibility: Materialize loaded packages into their final
install location and keep a record of what was installed.

Layout of a DirectorySource root:

    <root>/<name>/<version>/...         installed package trees
    <state>/installed-packages.json     declarative record of installs
    <state>/transactions.jsonl          append-only install log
"""

import json
import logging
import shutil
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, List, Optional

from seed.asyncutil import asyncify
from seed.core.errors import InstallFailureError
from seed.models import InstallationRecord, TransactionRecord, TransactionStatus
from seed.package import Package

logger = logging.getLogger(__name__)


class TransactionLogger:
    """Manages transaction logging to append-only JSONL file"""

    def __init__(self, log_file: Path):
        """
        Initialize transaction logger.

        Args:
            log_file: Path to transactions.jsonl
        """
        self.log_file = log_file
        self._lock = threading.Lock()

        # Ensure log file exists
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        if not self.log_file.exists():
            self.log_file.touch()

    def create_transaction(self, package_name: str, version: Optional[str] = None) -> TransactionRecord:
        """
        Create a new pending install transaction.

        Args:
            package_name: Package name
            version: Package version

        Returns:
            New transaction record
        """
        return TransactionRecord(
            id=f"txn-{uuid.uuid4().hex[:12]}",
            package_name=package_name,
            version=version,
            status=TransactionStatus.PENDING,
            started_at=datetime.now(UTC)
        )

    def log(self, transaction: TransactionRecord):
        """Append transaction to JSONL log file."""
        log_line = json.dumps(transaction.to_dict())
        with self._lock, open(self.log_file, "a") as f:
            f.write(log_line + "\n")

    def list_transactions(self, limit: int = 50) -> List[Dict[str, Any]]:
        """
        List recent transactions from log.

        Args:
            limit: Maximum number of transactions to return

        Returns:
            List of transaction records (most recent first)
        """
        if not self.log_file.exists():
            return []

        transactions = []
        with open(self.log_file, "r") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    transactions.append(json.loads(line))
                except json.JSONDecodeError as e:
                    logger.error(f"Failed to parse transaction log line: {e}")

        return list(reversed(transactions[-limit:]))


class Source(ABC):
    """A place packages can be installed into"""

    accepts_installs: bool = False

    @abstractmethod
    async def install(self, package: Package) -> None:
        """Install a loaded package."""


class DirectorySource(Source):
    """Installs packages by copying them under a root directory"""

    accepts_installs = True

    def __init__(self, root: Path, state_dir: Optional[Path] = None):
        """
        Initialize directory source.

        Args:
            root: Install root
            state_dir: Where records and transactions live (root if None)
        """
        self.root = Path(root)
        self.state_dir = Path(state_dir) if state_dir else self.root
        self.installed_packages_file = self.state_dir / "installed-packages.json"
        self.transaction_logger = TransactionLogger(self.state_dir / "transactions.jsonl")
        self._records_lock = threading.Lock()

    def package_dir(self, name: str, version: str) -> Path:
        return self.root / name / version

    async def install(self, package: Package) -> None:
        await self._install(package)

    @asyncify
    def _install(self, package: Package) -> InstallationRecord:
        transaction = self.transaction_logger.create_transaction(package.name, package.version)
        self.transaction_logger.log(transaction)

        target = self.package_dir(package.name, package.version)
        try:
            transaction.status = TransactionStatus.IN_PROGRESS
            if target.exists():
                logger.info(f"Replacing existing {package} at {target}")
                shutil.rmtree(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(package.path, target)

            record = InstallationRecord(
                name=package.name,
                version=package.version,
                installed_at=datetime.now(UTC),
                path=str(target),
                source_path=str(package.path),
                dependencies=dict(package.dependencies),
                transaction_id=transaction.id
            )
            with self._records_lock:
                records = self.load_records()
                records[f"{package.name}@{package.version}"] = record
                self._save_records(records)

        except OSError as e:
            transaction.status = TransactionStatus.FAILED
            transaction.error = str(e)
            transaction.completed_at = datetime.now(UTC)
            self.transaction_logger.log(transaction)
            raise InstallFailureError(f"Failed to install {package}: {e}", package_id=package.name)

        transaction.status = TransactionStatus.COMPLETED
        transaction.completed_at = datetime.now(UTC)
        self.transaction_logger.log(transaction)
        logger.debug(f"Copied {package} to {target}")
        return record

    def load_records(self) -> Dict[str, InstallationRecord]:
        """
        Load installation records from disk.

        Returns:
            Installation records keyed by "name@version"
        """
        if not self.installed_packages_file.exists():
            return {}

        try:
            data = json.loads(self.installed_packages_file.read_text())
            records = {}
            for key, record in data.get("packages", {}).items():
                record["installed_at"] = datetime.fromisoformat(record["installed_at"])
                records[key] = InstallationRecord(**record)
            return records
        except Exception as e:
            logger.error(f"Failed to load installed packages: {e}")
            return {}

    def _save_records(self, records: Dict[str, InstallationRecord]):
        data = {
            "version": "1.0",
            "packages": {}
        }
        for key, record in records.items():
            pkg_data = record.model_dump()
            pkg_data["installed_at"] = record.installed_at.isoformat()
            data["packages"][key] = pkg_data

        self.state_dir.mkdir(parents=True, exist_ok=True)
        self.installed_packages_file.write_text(json.dumps(data, indent=2))
