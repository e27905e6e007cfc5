"""HTTP client for the medical image dataset server.

Mirrors the calls the browser front-end makes, for scripting and the CLI.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests


class MedImgAPIError(Exception):
    """Raised when the dataset server returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MedImgAPI:
    """Client for the dataset server's /api endpoints."""

    def __init__(self, base_url: str = "http://localhost:3001", timeout: float = 30.0):
        """Initialize the client.

        Args:
            base_url: Base URL of the server (e.g., 'http://localhost:3001')
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> dict:
        """Send a request and return the decoded JSON body.

        Raises:
            MedImgAPIError: On transport failure or a non-2xx response
        """
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise MedImgAPIError(f"Request failed: {e}")

        if not response.ok:
            try:
                message = response.json().get("error") or response.text
            except ValueError:
                message = response.text
            raise MedImgAPIError(
                f"{method} {path} -> {response.status_code}: {message}",
                status_code=response.status_code,
            )
        return response.json()

    def health_check(self) -> bool:
        """Check if the server is reachable."""
        try:
            return self._request("GET", "/api/health").get("status") == "ok"
        except MedImgAPIError:
            return False

    def list_datasets(self) -> dict[str, dict]:
        """Return dataset key -> info (including 'available')."""
        return self._request("GET", "/api/datasets")["datasets"]

    def fetch_samples(
        self,
        dataset_key: str,
        classes: list[str],
        num_samples: int = 8,
    ) -> dict:
        """Fetch sample images for some classes.

        Returns:
            Dict with 'images', 'organizedImages' and 'count'
        """
        payload = {
            "datasetKey": dataset_key,
            "classes": classes,
            "numSamples": num_samples,
        }
        return self._request("POST", "/api/fetch-dataset-samples", json=payload)

    def class_images(self, dataset_key: str, class_name: str, limit: int = 50) -> list[dict]:
        """List images of one class."""
        data = self._request(
            "GET",
            f"/api/images/{quote(class_name, safe='')}",
            params={"dataset": dataset_key, "limit": limit},
        )
        return data["images"]

    def fetch_test_image(self, dataset_key: str, class_name: Optional[str] = None) -> dict:
        """Fetch one random test image as {'filename', 'path'}."""
        payload = {"datasetKey": dataset_key}
        if class_name:
            payload["className"] = class_name
        return self._request("POST", "/api/fetch-test-image", json=payload)["image"]

    def download_image(self, image_path: str, dest: str | Path) -> Path:
        """Download an image by its web path into ``dest`` (file or directory).

        Returns:
            Path of the written file
        """
        url = f"{self.base_url}{image_path}"
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise MedImgAPIError(f"Request failed: {e}")
        if response.status_code != 200:
            raise MedImgAPIError(
                f"GET {image_path} -> {response.status_code}",
                status_code=response.status_code,
            )

        dest = Path(dest)
        if dest.is_dir():
            dest = dest / Path(image_path).name
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response.content)
        return dest
