"""
PIN credential storage.

Keeps a salted PBKDF2-HMAC-SHA256 verifier of the PIN in a small TOML file.
The PIN itself is never written anywhere.
"""
import base64
import hmac
import sys
if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import toml
from Cryptodome.Hash import SHA256
from Cryptodome.Protocol.KDF import PBKDF2
from Cryptodome.Random import get_random_bytes
from loguru import logger

from ..exceptions import CredentialStoreError, PinFormatError
from ..Utils.atomic_file_ops import remove_if_present, replace_file_contents
from .pin_entry import DIGITS


class PinCredentialStore:
    """File-backed PIN verifier. A missing or unreadable file means "not set up"."""

    SALT_SIZE = 32  # 256 bits
    KEY_SIZE = 32   # 256 bits
    ITERATIONS = 100000  # PBKDF2 iterations
    VERSION = 1

    def __init__(self, path: Union[str, Path], iterations: Optional[int] = None, pin_length: int = 4):
        self.path = Path(path)
        self.iterations = iterations or self.ITERATIONS
        self.pin_length = pin_length

    def exists(self) -> bool:
        """True if a usable verifier has been stored (setup is complete)."""
        try:
            record = self._load()
        except CredentialStoreError as e:
            logger.warning(f"Credential store unreadable, treating as not set up: {e}")
            return False
        return record is not None and record.get("setup_complete") is True

    def stored_pin_length(self) -> Optional[int]:
        """Number of digits in the stored PIN, or None when nothing usable is stored."""
        try:
            record = self._load()
        except CredentialStoreError:
            return None
        if record is None:
            return None
        length = record.get("pin_length")
        if isinstance(length, bool) or not isinstance(length, int) or length < 1:
            return None
        return length

    def save_pin(self, pin: str) -> None:
        """
        Store a verifier for ``pin``, replacing any previous one.

        Raises:
            PinFormatError: if the PIN is not ``pin_length`` decimal digits.
            CredentialStoreError: if the file cannot be written.
        """
        self._check_format(pin)
        salt = get_random_bytes(self.SALT_SIZE)
        record = {
            "version": self.VERSION,
            "setup_complete": True,
            "iterations": self.iterations,
            "pin_length": len(pin),
            "salt": base64.b64encode(salt).decode("ascii"),
            "verifier": base64.b64encode(self._derive(pin, salt, self.iterations)).decode("ascii"),
        }
        try:
            replace_file_contents(self.path, toml.dumps({"pin": record}))
        except OSError as e:
            raise CredentialStoreError(f"Could not write credentials to {self.path}: {e}") from e
        logger.info(f"Stored new PIN verifier at {self.path}")

    def verify_pin(self, pin: str) -> bool:
        """
        Check ``pin`` against the stored verifier.

        Returns False for a wrong or malformed PIN, or when nothing is stored.

        Raises:
            CredentialStoreError: if the stored record is unreadable or damaged.
        """
        record = self._load()
        if record is None:
            return False
        if not isinstance(pin, str) or not pin or any(c not in DIGITS for c in pin):
            return False
        try:
            salt = base64.b64decode(record["salt"])
            expected = base64.b64decode(record["verifier"])
            iterations = int(record.get("iterations", self.ITERATIONS))
        except (KeyError, ValueError, TypeError) as e:
            raise CredentialStoreError(f"Stored credentials are damaged: {e}") from e
        return hmac.compare_digest(self._derive(pin, salt, iterations), expected)

    def clear(self) -> bool:
        """Forget the stored PIN. Returns True if something was removed."""
        try:
            removed = remove_if_present(self.path)
        except OSError as e:
            raise CredentialStoreError(f"Could not remove {self.path}: {e}") from e
        if removed:
            logger.info("Stored PIN verifier removed")
        return removed

    def _load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise CredentialStoreError(f"Could not read credentials from {self.path}: {e}") from e
        record = data.get("pin")
        if not isinstance(record, dict):
            raise CredentialStoreError(f"No [pin] table in {self.path}")
        return record

    def _check_format(self, pin: str) -> None:
        if not isinstance(pin, str) or len(pin) != self.pin_length or any(c not in DIGITS for c in pin):
            raise PinFormatError(f"PIN must be exactly {self.pin_length} digits")

    def _derive(self, pin: str, salt: bytes, iterations: int) -> bytes:
        return PBKDF2(
            pin.encode("utf-8"),
            salt,
            dkLen=self.KEY_SIZE,
            count=iterations,
            hmac_hash_module=SHA256,
        )
