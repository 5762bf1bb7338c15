"""Wallet file persistence with backup-on-divergence."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pydantic

from tron_wallet.errors import CorruptWalletFile, NotFoundError, ValidationError
from tron_wallet.wallet.models import WalletRecord, utcnow

if TYPE_CHECKING:
    from tron_wallet.wallet.gateway import TronGateway
    from tron_wallet.wallet.networks import NetworkConfig

logger = logging.getLogger("tron_wallet.wallet.store")

BACKUP_SUFFIX_RE = re.compile(r"\.bk\d*$")
_BAD_NAME_RE = re.compile(r"[/\\\x00]")


def wallet_filename(name: str, network: str) -> str:
    return f"{name}-{network}.json"


def is_backup_name(filename: str) -> bool:
    return BACKUP_SUFFIX_RE.search(filename) is not None


def list_wallets(wallet_dir: Path) -> list[str]:
    """Return wallet filenames in *wallet_dir*, skipping backups.

    A missing directory yields an empty list.
    """
    if not wallet_dir.is_dir():
        return []
    return sorted(
        p.name
        for p in wallet_dir.iterdir()
        if p.is_file() and p.name.endswith(".json") and not is_backup_name(p.name)
    )


def parse_wallet(path: Path) -> WalletRecord:
    """Parse *path* as a wallet record.

    Raises
    ------
    CorruptWalletFile
        If the content is not JSON or does not match the wallet schema.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CorruptWalletFile(path, f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise CorruptWalletFile(path, "expected a JSON object")
    try:
        return WalletRecord.model_validate(data)
    except pydantic.ValidationError as exc:
        raise CorruptWalletFile(path, f"{exc.error_count()} invalid field(s)") from exc


def load_wallet(wallet_dir: Path, filename: str) -> WalletRecord | None:
    """Read a wallet file. Returns ``None`` if it does not exist."""
    path = wallet_dir / filename
    if not path.exists():
        return None
    record = parse_wallet(path)
    logger.debug(f"Loaded wallet {record.address} from {path}")
    return record


def read_wallet(wallet_dir: Path, filename: str) -> WalletRecord:
    """Like :func:`load_wallet` but raises ``NotFoundError`` when absent."""
    record = load_wallet(wallet_dir, filename)
    if record is None:
        raise NotFoundError(f"Wallet file {wallet_dir / filename} not found")
    return record


def next_backup_path(file_path: Path) -> Path:
    """Return the first unused name among ``.bk``, ``.bk2``, ``.bk3``, ..."""
    candidate = file_path.with_name(file_path.name + ".bk")
    counter = 1
    while candidate.exists():
        counter += 1
        candidate = file_path.with_name(f"{file_path.name}.bk{counter}")
    return candidate


def save_wallet(
    record: WalletRecord,
    file_path: Path,
    now: datetime | None = None,
) -> WalletRecord:
    """Write *record* to *file_path*, moving a different wallet aside first.

    If *file_path* already holds a wallet with the same address, keys and
    network the file is simply rewritten. Otherwise (including unreadable
    content) the existing file is renamed to the next free backup name.

    Returns
    -------
    WalletRecord
        The record as written, with ``last_updated`` refreshed.
    """
    if file_path.exists():
        try:
            existing: WalletRecord | None = parse_wallet(file_path)
        except CorruptWalletFile as exc:
            logger.warning(f"Existing file is unreadable, backing it up: {exc}")
            existing = None

        if not record.same_wallet(existing):
            backup = next_backup_path(file_path)
            file_path.rename(backup)
            logger.warning(f"Backed up existing wallet {file_path.name} to {backup.name}")

    written = record.touched(now)
    file_path.write_text(written.to_json(), encoding="utf-8")
    logger.info(f"Saved wallet {written.address} to {file_path}")
    return written


def create_wallet(
    wallet_dir: Path,
    network: NetworkConfig,
    name: str,
    gateway: TronGateway,
) -> tuple[WalletRecord, str]:
    """Generate a keypair on *network* and persist it as ``<name>-<network>.json``.

    Parameters
    ----------
    wallet_dir:
        Directory holding wallet files; created if missing.
    network:
        Network the new wallet belongs to.
    name:
        User-chosen wallet name, used as the filename prefix.
    gateway:
        Source of the key material. Its errors propagate unchanged.

    Returns
    -------
    tuple[WalletRecord, str]
        The saved record and its filename inside *wallet_dir*.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Wallet name cannot be empty")
    if _BAD_NAME_RE.search(name):
        raise ValidationError(f"Wallet name '{name}' must not contain path separators")

    wallet_dir.mkdir(parents=True, exist_ok=True)

    keypair = gateway.create_account(network)
    now = utcnow()
    record = WalletRecord(
        address=keypair.address,
        private_key=keypair.private_key,
        public_key=keypair.public_key,
        network=network.network,
        created_at=now,
        last_updated=now,
    )

    filename = wallet_filename(name, network.name)
    saved = save_wallet(record, wallet_dir / filename, now=now)
    return saved, filename
