"""
Metadata utilities for Rib Wall PDE artifacts.

Records which parameters produced an exported DXF/CSV/STEP so a cut file can
always be traced back to the quote it belongs to.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
import hashlib
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from config import InstallationMode, RibParams, config


REQUIRED_FIELDS = (
    "artifact",
    "artifact_type",
    "generated_at",
    "params_hash",
    "contributor",
    "installation_mode",
    "params",
    "provenance",
)


def _serialize_params(params: RibParams, installation_mode: InstallationMode) -> str:
    """Serialize the generation inputs deterministically for hashing."""
    payload = {
        "params": params.to_dict(),
        "installation_mode": InstallationMode.parse(installation_mode).value,
        "pricing": asdict(config.pricing),
    }
    return json.dumps(payload, default=str, sort_keys=True)


def compute_params_hash(params: RibParams, installation_mode: InstallationMode) -> str:
    """Return a stable hash of the parameters behind an artifact."""
    payload = _serialize_params(params, installation_mode).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


@dataclass
class ArtifactMetadata:
    """Provenance record stored beside an exported artifact."""

    artifact: str
    artifact_type: str
    generated_at: str
    params_hash: str
    contributor: str
    installation_mode: str
    params: Dict[str, Any]
    provenance: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def write_artifact_metadata(
    artifact_path: Path,
    params: RibParams,
    installation_mode: InstallationMode,
    artifact_type: str,
    contributor: Optional[str] = None,
) -> Path:
    """Persist metadata next to an exported artifact.

    Args:
        artifact_path: Path to the artifact being exported.
        params: Parameters that produced it.
        installation_mode: Install mode used for generation.
        artifact_type: DXF, CSV, STEP, STL, etc.
        contributor: Optional contributor identifier (env var RIBWALL_CONTRIBUTOR used if unset).
    """

    mode = InstallationMode.parse(installation_mode)
    metadata = ArtifactMetadata(
        artifact=artifact_path.name,
        artifact_type=artifact_type,
        generated_at=datetime.now(timezone.utc).isoformat(),
        params_hash=compute_params_hash(params, mode),
        contributor=contributor or os.environ.get("RIBWALL_CONTRIBUTOR", "unknown"),
        installation_mode=mode.value,
        params=params.to_dict(),
        provenance={
            "toolchain": config.project_name,
            "version": config.version,
            "automated": True,
        },
    )

    metadata_path = artifact_path.parent / f"{artifact_path.stem}.metadata.json"
    metadata_path.write_text(json.dumps(metadata.to_dict(), indent=2))
    return metadata_path
