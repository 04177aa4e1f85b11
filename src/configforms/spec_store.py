"""Filesystem store for package config spec documents."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field

from configforms.exceptions import SpecStoreError
from configforms.logging import get_logger
from configforms.schema import load_config_spec
from configforms.typing.models import ObjectValueSpec

_SPEC_FILE_VERSION = 1

logger = get_logger(__name__)


class SpecStore(BaseModel):
    """Directory of ``<package>-<version>.spec.json`` documents."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    root: Path = Field(description="Spec directory root.")

    def model_post_init(self, __context: object, /) -> None:
        """Ensure the spec directory exists after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        self.root.mkdir(parents=True, exist_ok=True)

    def spec_path(self, *, package_id: str, version: str) -> Path:
        """Build the document path for a package version.

        Args:
            package_id (str): Package identifier.
            version (str): Package version.

        Returns:
            Path: Document path.
        """
        safe_id = re.sub(r"[^a-z0-9._-]+", "-", package_id.lower()).strip("-") or "package"
        safe_version = re.sub(r"[^A-Za-z0-9._-]+", "-", version).strip("-") or "0"
        return self.root / f"{safe_id}-{safe_version}.spec.json"

    @staticmethod
    def load(path: Path) -> ObjectValueSpec:
        """Load and check a spec document.

        Args:
            path (Path): JSON document holding a bare field mapping or a versioned envelope.

        Raises:
            SpecStoreError: If the file is missing or not a JSON object.
            SchemaDefectError: If the spec itself is defective.

        Returns:
            ObjectValueSpec: Root config spec.
        """
        return load_config_spec(read_spec_document(path), name=path.name.removesuffix(".json"))

    def save(self, *, package_id: str, version: str, document: dict[str, Any]) -> Path:
        """Check and persist a spec document.

        Args:
            package_id (str): Package identifier.
            version (str): Package version.
            document (dict[str, Any]): Field key to spec document.

        Raises:
            SchemaDefectError: If the spec is defective; nothing is written.

        Returns:
            Path: Written file path.
        """
        load_config_spec(document)
        path = self.spec_path(package_id=package_id, version=version)
        envelope = {
            "spec_file_version": _SPEC_FILE_VERSION,
            "package_id": package_id,
            "version": version,
            "spec": document,
        }
        path.write_text(json.dumps(envelope, indent=2, sort_keys=True), encoding="utf-8")
        logger.info("Spec stored", extra={"spec_path": str(path)})
        return path

    def list_specs(self) -> list[Path]:
        """List stored spec documents.

        Returns:
            list[Path]: Spec files.
        """
        return sorted(self.root.glob("*.spec.json"))

    def find(self, package_id: str, version: str) -> ObjectValueSpec:
        """Load the stored spec of a package version.

        Args:
            package_id (str): Package identifier.
            version (str): Package version.

        Raises:
            SpecStoreError: If no document is stored for that version.

        Returns:
            ObjectValueSpec: Root config spec.
        """
        path = self.spec_path(package_id=package_id, version=version)
        if not path.is_file():
            raise SpecStoreError(message=f"No spec stored for {package_id} {version}")
        return self.load(path)


def read_spec_document(path: Path) -> dict[str, Any]:
    """Read a spec document, unwrapping the versioned envelope when present.

    Args:
        path (Path): JSON document path.

    Raises:
        SpecStoreError: If the file is missing, not JSON or not a JSON object.

    Returns:
        dict[str, Any]: Field key to spec document.
    """
    if not path.is_file():
        raise SpecStoreError(message=f"Spec path is not a file: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SpecStoreError(message=f"Spec document is not valid JSON: {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SpecStoreError(message="Spec payload must be a JSON object")

    payload_obj = cast("dict[str, Any]", payload)
    if "spec_file_version" in payload_obj and isinstance(payload_obj.get("spec"), dict):
        return cast("dict[str, Any]", payload_obj["spec"])
    return payload_obj
