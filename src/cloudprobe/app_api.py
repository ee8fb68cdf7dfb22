"""
HTTP client for the image application under test.

Each call returns the raw ``requests.Response`` so a check can assert on the
status code itself; ``ImageRecord.from_api`` turns JSON bodies into records.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageRecord:
    id: str
    object_key: str
    object_type: str
    object_size: int
    created_at: Any
    last_modified: Any

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ImageRecord":
        return cls(
            id=str(data["id"]),
            object_key=data["object_key"],
            object_type=data.get("object_type", ""),
            object_size=int(data.get("object_size") or 0),
            created_at=data.get("created_at"),
            last_modified=data.get("last_modified"),
        )

    @classmethod
    def list_from_api(cls, payload: List[Dict[str, Any]]) -> List["ImageRecord"]:
        return [cls.from_api(item) for item in payload]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ImageApiClient:
    """Talks to the application on one instance, e.g. ``http://<public-ip>``."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def instance_metadata(self) -> requests.Response:
        """``GET /`` returns the instance's availability zone, region and private IP."""
        return self.session.get(self._url("/"), timeout=self.timeout)

    def upload_image(self, name: str, content: bytes, content_type: str = "image/jpeg") -> requests.Response:
        files = {"upfile": (name, content, content_type)}
        response = self.session.post(self._url("/api/image"), files=files, timeout=self.timeout)
        logger.info(f"Uploaded {name} ({len(content)} bytes): HTTP {response.status_code}")
        return response

    def list_images(self) -> requests.Response:
        return self.session.get(self._url("/api/image"), timeout=self.timeout)

    def get_image(self, image_id: str) -> requests.Response:
        return self.session.get(self._url(f"/api/image/{image_id}"), timeout=self.timeout)

    def delete_image(self, image_id: str) -> requests.Response:
        response = self.session.delete(self._url(f"/api/image/{image_id}"), timeout=self.timeout)
        logger.info(f"Deleted image {image_id}: HTTP {response.status_code}")
        return response

    def images(self) -> List[ImageRecord]:
        """Parsed listing; raises ``requests.HTTPError`` on a non-2xx status."""
        response = self.list_images()
        response.raise_for_status()
        return ImageRecord.list_from_api(response.json())
