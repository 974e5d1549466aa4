from __future__ import annotations

import asyncio
import logging
import mimetypes

import aiohttp
from google.auth.credentials import Credentials
from google.auth.transport.requests import Request

from ...domain.errors import ImageHostError
from ...domain.repositories import ImageHost
from ..metrics import metrics

DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
DRIVE_PERMISSIONS_URL = "https://www.googleapis.com/drive/v3/files/{file_id}/permissions"
PUBLIC_URL = "https://drive.google.com/uc?export=view&id={file_id}"

logger = logging.getLogger(__name__)


class DriveImageHost(ImageHost):
    """
    Загружает картинку в Google Drive и открывает доступ по ссылке.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        folder_id: str | None = None,
        session_timeout: int = 60,
    ):
        self._credentials = credentials
        self._folder_id = folder_id
        self._session_timeout = session_timeout
        self._session: aiohttp.ClientSession | None = None

    async def _access_token(self) -> str:
        if not self._credentials.valid:
            await asyncio.to_thread(self._credentials.refresh, Request())
        return self._credentials.token

    def _get_session(self) -> aiohttp.ClientSession:
        if not self._session or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._session_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    @metrics.wrap_async("drive:upload", source="drive")
    async def upload(self, data: bytes, filename: str) -> str:
        metadata: dict = {"name": filename}
        if self._folder_id:
            metadata["parents"] = [self._folder_id]
        content_type = mimetypes.guess_type(filename)[0] or "image/jpeg"

        try:
            headers = {"Authorization": f"Bearer {await self._access_token()}"}
        except Exception as exc:
            raise ImageHostError(f"Could not authorize Drive upload: {exc}") from exc

        session = self._get_session()
        with aiohttp.MultipartWriter("related") as body:
            body.append_json(metadata)
            body.append(data, {"Content-Type": content_type})

        try:
            async with session.post(
                DRIVE_UPLOAD_URL,
                params={"uploadType": "multipart", "fields": "id", "supportsAllDrives": "true"},
                data=body,
                headers=headers,
            ) as resp:
                if resp.status >= 400:
                    raise ImageHostError(f"Drive upload failed: {resp.status} {(await resp.text())[:200]}")
                payload = await resp.json()
            file_id = payload.get("id")
            if not file_id:
                raise ImageHostError("Drive upload returned no file id")

            async with session.post(
                DRIVE_PERMISSIONS_URL.format(file_id=file_id),
                params={"supportsAllDrives": "true"},
                json={"role": "reader", "type": "anyone"},
                headers=headers,
            ) as resp:
                if resp.status >= 400:
                    raise ImageHostError(f"Drive share failed: {resp.status} {(await resp.text())[:200]}")
        except aiohttp.ClientError as exc:
            raise ImageHostError(f"Drive request failed: {exc}") from exc

        logger.info("Uploaded %s to Drive as %s", filename, file_id)
        return PUBLIC_URL.format(file_id=file_id)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
