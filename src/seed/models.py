# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Installer Data Models

Defines wire and record structures shared by remotes, destinations and
the install command: remote listings and queries, remote configuration,
install requests, installation records and transactions.
"""

from typing import Dict, Optional, Any, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class Origin(str, Enum):
    """Where a package descriptor came from"""
    LOCAL = "local"
    REMOTE = "remote"


class RemoteType(str, Enum):
    """Remote protocol"""
    DIRECTORY = "directory"
    HTTP = "http"


class TransactionStatus(str, Enum):
    """Transaction status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class RemoteQuery(BaseModel):
    """Query sent to a remote's list operation"""
    name: str
    version: Optional[str] = None
    exact: bool = False
    dependencies: bool = False  # Whether to include dependency info


class RemotePackageInfo(BaseModel):
    """
    Package listing returned by a remote.

    Only name and version are required; everything else is opaque to the
    installer and handed back to the same remote's fetch operation.
    """
    model_config = ConfigDict(extra="allow")

    name: str
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)
    description: str = ""
    url: Optional[str] = None  # Download URL (http remotes)
    path: Optional[str] = None  # Package directory (directory remotes)
    checksum: Optional[str] = None  # sha256 of the artifact
    signature_url: Optional[str] = None  # Detached GPG signature


class RemoteConfig(BaseModel):
    """Remote configuration from remotes.conf"""
    name: str
    display_name: str
    url: str
    enabled: bool = True
    priority: int = 50  # Lower number = higher priority
    gpgcheck: bool = False
    gpgkey: Optional[str] = None
    type: RemoteType = RemoteType.DIRECTORY


class InstallRequest(BaseModel):
    """Parsed arguments of the install command"""
    package_ids: List[str] = Field(default_factory=list)
    version: Optional[str] = None
    remote: Optional[str] = None
    dependencies: Optional[bool] = None  # None = decide from the first package's origin


class InstallationRecord(BaseModel):
    """Record of an installed package"""
    name: str
    version: str
    installed_at: datetime
    path: str
    source_path: str
    dependencies: Dict[str, str] = Field(default_factory=dict)
    transaction_id: str


class TransactionRecord(BaseModel):
    """Transaction record for install operations"""
    id: str
    operation: str = "install"
    package_name: str
    version: Optional[str] = None
    status: TransactionStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "operation": self.operation,
            "package_name": self.package_name,
            "version": self.version,
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "error": self.error,
        }
