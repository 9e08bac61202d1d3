# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
GPG verification for fetched artifacts

Uses python-gnupg to check YUM-style detached signatures published next
to remote artifacts when a remote is configured with gpgcheck.
"""

from pathlib import Path
from typing import Optional, Union

import gnupg

from seed.core.errors import SeedError


class GPGNotFoundError(SeedError):
    """Raised when GPG executable is not found on the system"""


class InvalidSignatureError(SeedError):
    """Raised when signature verification fails"""


def _get_gpg_instance(keyring_dir: Optional[str] = None) -> gnupg.GPG:
    """
    Get GPG instance with optional custom keyring directory.

    Args:
        keyring_dir: Optional path to custom GPG keyring directory.
                    If None, uses system default (~/.gnupg)

    Returns:
        gnupg.GPG instance

    Raises:
        GPGNotFoundError: If GPG executable is not found
    """
    try:
        if keyring_dir:
            # Ensure keyring directory exists
            Path(keyring_dir).expanduser().mkdir(parents=True, exist_ok=True)
            return gnupg.GPG(gnupghome=str(Path(keyring_dir).expanduser()))
        return gnupg.GPG()
    except (OSError, ValueError) as e:
        raise GPGNotFoundError(
            f"GPG not found or not properly configured. "
            f"Please install GPG (gpg or gnupg). Error: {str(e)}"
        )


def import_key_file(key_path: Union[str, Path], keyring_dir: Optional[str] = None) -> str:
    """
    Import an ASCII-armored public key file into the keyring.

    Returns:
        Fingerprint of the first imported key

    Raises:
        FileNotFoundError: If the key file doesn't exist
        ValueError: If the key cannot be imported
    """
    key_path = Path(key_path).expanduser()
    if not key_path.exists():
        raise FileNotFoundError(f"GPG key not found: {key_path}")

    gpg = _get_gpg_instance(keyring_dir)
    result = gpg.import_keys(key_path.read_text(encoding="utf-8"))
    if not result.count or not result.fingerprints:
        raise ValueError(f"Failed to import key {key_path}. {result.stderr}")
    return result.fingerprints[0]


def verify_file(
    filepath: Union[str, Path],
    signature_path: Union[str, Path],
    keyring_dir: Optional[str] = None
) -> None:
    """
    Verify a detached GPG signature against a file.

    Args:
        filepath: Path to the signed file
        signature_path: Path to the .asc signature file
        keyring_dir: Optional custom keyring directory

    Raises:
        GPGNotFoundError: If GPG is not installed
        FileNotFoundError: If file or signature doesn't exist
        InvalidSignatureError: If the signature does not verify
    """
    filepath = Path(filepath)
    signature_path = Path(signature_path)

    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    if not signature_path.exists():
        raise FileNotFoundError(f"Signature file not found: {signature_path}")

    gpg = _get_gpg_instance(keyring_dir)
    with open(signature_path, "rb") as sig_file:
        verified = gpg.verify_file(sig_file, str(filepath))

    if verified.valid:
        return

    # Construct detailed error message
    error_parts = []
    if verified.status == "signature bad":
        error_parts.append("Signature does not match file content")
    elif verified.status == "no public key":
        error_parts.append(f"Public key not found: {verified.key_id}")
    elif verified.status:
        error_parts.append(f"Verification failed: {verified.status}")

    message = ". ".join(error_parts) if error_parts else "Signature verification failed"
    raise InvalidSignatureError(f"{filepath.name}: {message}")
