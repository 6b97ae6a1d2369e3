import uuid
from pathlib import Path
from typing import Optional, Union


class DeviceIdentity:
    """
    Opaque per-installation device identifier.

    Generated once (random UUID) and persisted at `path` for the life of the
    profile. The value is handed to the guard explicitly, never read globally.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._device_id: Optional[str] = None

    def get(self) -> str:
        if self._device_id is None:
            self._device_id = self._load() or self._create()
        return self._device_id

    def _load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        value = self.path.read_text(encoding="utf-8").strip()
        return value or None

    def _create(self) -> str:
        device_id = str(uuid.uuid4())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(device_id, encoding="utf-8")
        return device_id
