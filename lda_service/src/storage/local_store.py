"""
LocalArtifactStore - model bundles as directories on the local filesystem.

Layout:
    {base_dir}/{model_id}/manifest.json
    {base_dir}/{model_id}/<artifact files>

Writes go to a hidden staging directory next to the target and are swapped
into place with os.replace, so readers see either the old bundle or the new
one, never a mix.
"""

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Dict, Iterable, Union

from lda_service.src.exceptions import PersistenceError
from lda_service.src.interfaces import MANIFEST_NAME, ArtifactStore

logger = logging.getLogger(__name__)


class LocalArtifactStore(ArtifactStore):
    """
    Directory-backed artifact store.

    Args:
        base_dir: Root directory holding one sub-directory per model id
    """

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def _model_dir(self, model_id: str) -> Path:
        if not model_id or model_id.startswith(".") or "/" in model_id or "\\" in model_id:
            raise PersistenceError(f"Invalid model id: {model_id!r}", model_id)
        return self.base_dir / model_id

    def write_artifacts(self, model_id: str, artifacts: Dict[str, bytes]) -> None:
        target = self._model_dir(model_id)
        staging = None

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{model_id}.staging-", dir=self.base_dir))

            for name, payload in artifacts.items():
                (staging / name).write_bytes(payload)

            if target.exists():
                retired = self.base_dir / f".{model_id}.retired-{uuid.uuid4().hex}"
                os.replace(target, retired)
                try:
                    os.replace(staging, target)
                except OSError:
                    # Put the previous bundle back before reporting the failure
                    os.replace(retired, target)
                    raise
                shutil.rmtree(retired, ignore_errors=True)
            else:
                os.replace(staging, target)
        except OSError as e:
            if staging is not None and staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
            raise PersistenceError(f"Failed to write artifacts to {target}: {e}", model_id) from e

        logger.info(f"Wrote {len(artifacts)} artifacts to {target}")

    def read_artifacts(self, model_id: str, names: Iterable[str]) -> Dict[str, bytes]:
        model_dir = self._model_dir(model_id)

        artifacts = {}
        for name in names:
            path = model_dir / name
            try:
                artifacts[name] = path.read_bytes()
            except FileNotFoundError as e:
                raise PersistenceError(f"Missing artifact: {path}", model_id) from e
            except OSError as e:
                raise PersistenceError(f"Failed to read {path}: {e}", model_id) from e

        logger.debug(f"Read {len(artifacts)} artifacts from {model_dir}")
        return artifacts

    def exists(self, model_id: str) -> bool:
        return (self._model_dir(model_id) / MANIFEST_NAME).is_file()
