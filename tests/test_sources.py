# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for Install Destinations

Tests the directory source layout, installation records and the
transaction log.
"""

import json

import pytest
from conftest import write_package

from seed.core.errors import InstallFailureError
from seed.models import TransactionStatus
from seed.package import load_package
from seed.sources import DirectorySource, TransactionLogger


@pytest.fixture
def source(tmp_path):
    return DirectorySource(tmp_path / "installed", tmp_path / "state")


class TestTransactionLogger:
    """Test suite for TransactionLogger"""

    def test_log_and_list(self, tmp_path):
        txn_logger = TransactionLogger(tmp_path / "state" / "transactions.jsonl")
        first = txn_logger.create_transaction("foo", "1.0.0")
        txn_logger.log(first)
        second = txn_logger.create_transaction("bar")
        txn_logger.log(second)

        transactions = txn_logger.list_transactions()

        assert [t["id"] for t in transactions] == [second.id, first.id]
        assert transactions[1]["status"] == "pending"
        assert transactions[1]["operation"] == "install"
        assert first.id.startswith("txn-")

    def test_list_limit(self, tmp_path):
        txn_logger = TransactionLogger(tmp_path / "transactions.jsonl")
        for index in range(5):
            txn_logger.log(txn_logger.create_transaction(f"pkg{index}"))

        assert len(txn_logger.list_transactions(limit=2)) == 2


class TestDirectorySource:
    """Test suite for DirectorySource"""

    def test_accepts_installs(self, source):
        assert source.accepts_installs

    @pytest.mark.asyncio
    async def test_install_copies_package(self, tmp_path, source):
        package_dir = write_package(tmp_path / "src" / "foo", "foo", "1.0.0", {"bar": "^1.0"})
        (package_dir / "index.js").write_text("module.exports = 1;\n")

        await source.install(load_package(package_dir))

        target = tmp_path / "installed" / "foo" / "1.0.0"
        assert (target / "package.json").exists()
        assert (target / "index.js").read_text() == "module.exports = 1;\n"

    @pytest.mark.asyncio
    async def test_install_records_package(self, tmp_path, source):
        package_dir = write_package(tmp_path / "src" / "foo", "foo", "1.0.0", {"bar": "^1.0"})

        await source.install(load_package(package_dir))

        records = source.load_records()
        record = records["foo@1.0.0"]
        assert record.dependencies == {"bar": "^1.0"}
        assert record.source_path == str(package_dir.resolve())

        data = json.loads((tmp_path / "state" / "installed-packages.json").read_text())
        assert "foo@1.0.0" in data["packages"]

        transactions = source.transaction_logger.list_transactions()
        assert transactions[0]["status"] == TransactionStatus.COMPLETED.value
        assert transactions[0]["id"] == record.transaction_id

    @pytest.mark.asyncio
    async def test_reinstall_replaces_copy(self, tmp_path, source):
        package_dir = write_package(tmp_path / "src" / "foo", "foo", "1.0.0")
        (package_dir / "old.txt").write_text("old")
        await source.install(load_package(package_dir))

        (package_dir / "old.txt").unlink()
        await source.install(load_package(package_dir))

        target = tmp_path / "installed" / "foo" / "1.0.0"
        assert not (target / "old.txt").exists()
        assert len(source.load_records()) == 1

    @pytest.mark.asyncio
    async def test_versions_install_side_by_side(self, tmp_path, source):
        await source.install(load_package(write_package(tmp_path / "a", "foo", "1.0.0")))
        await source.install(load_package(write_package(tmp_path / "b", "foo", "2.0.0")))

        assert sorted(source.load_records()) == ["foo@1.0.0", "foo@2.0.0"]

    @pytest.mark.asyncio
    async def test_copy_failure(self, tmp_path, source):
        package = load_package(write_package(tmp_path / "src" / "foo", "foo", "1.0.0"))
        package.path = tmp_path / "vanished"

        with pytest.raises(InstallFailureError, match="Failed to install foo@1.0.0"):
            await source.install(package)

        transactions = source.transaction_logger.list_transactions()
        assert transactions[0]["status"] == "failed"
        assert transactions[0]["error"]
