"""Local JSON file holding the game state document"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from quest_tracker.config import DATA_PATH, LOCAL_STATE_FILENAME
from quest_tracker.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class LocalStateStore:
    """
    Single-document store on the local filesystem

    Writes go to a temporary sibling file that then replaces the target, so
    a crash mid-write never leaves a truncated document behind.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DATA_PATH / LOCAL_STATE_FILENAME

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Read the stored document

        Returns:
            The document, or None when it is missing or unreadable
        """
        if not self.path.exists():
            logger.debug(f"No local state at {self.path}")
            return None

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable local state at {self.path}: {e}")
            return None

        if not isinstance(document, dict):
            logger.warning(f"Ignoring local state at {self.path}: expected an object, got {type(document).__name__}")
            return None

        return document

    def save(self, document: Dict[str, Any]) -> None:
        """
        Write the document

        Raises:
            LocalStoreError: the file could not be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise wrap_external_exception(e, operation="save_local_state", context={"path": str(self.path)})

        logger.debug(f"Local state written to {self.path}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
