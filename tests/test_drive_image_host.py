import unittest

import aiohttp

from congress_bot.domain import ImageHostError
from congress_bot.infrastructure.images import DriveImageHost


class FakeCredentials:
    valid = True
    token = "drive-token"


class FakeResponse:
    def __init__(self, status: int = 200, payload=None, text: str = ""):
        self.status = status
        self._payload = payload or {}
        self._text = text

    async def json(self):
        return self._payload

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self):
        self.closed = True


class BodyCollector:
    def __init__(self):
        self.chunks: list[bytes] = []

    async def write(self, data):
        self.chunks.append(bytes(data))

    @property
    def raw(self) -> bytes:
        return b"".join(self.chunks)


class DriveImageHostTests(unittest.IsolatedAsyncioTestCase):
    def make_host(self, session: FakeSession, folder_id: str | None = "folder-1") -> DriveImageHost:
        host = DriveImageHost(FakeCredentials(), folder_id=folder_id)
        host._session = session
        return host

    async def test_upload_shares_file_and_returns_public_url(self):
        session = FakeSession(FakeResponse(payload={"id": "file-9"}), FakeResponse())
        host = self.make_host(session)

        url = await host.upload(b"\xff\xd8raw", "5_abc.jpg")

        self.assertEqual(url, "https://drive.google.com/uc?export=view&id=file-9")
        upload_url, upload_kwargs = session.calls[0]
        self.assertTrue(upload_url.startswith("https://www.googleapis.com/upload/drive/v3/files"))
        self.assertEqual(upload_kwargs["params"]["uploadType"], "multipart")
        self.assertEqual(upload_kwargs["headers"]["Authorization"], "Bearer drive-token")

        body = upload_kwargs["data"]
        self.assertIsInstance(body, aiohttp.MultipartWriter)
        self.assertTrue(body.content_type.startswith("multipart/related"))
        collector = BodyCollector()
        await body.write(collector)
        self.assertIn(b'"name": "5_abc.jpg"', collector.raw)
        self.assertIn(b'"parents": ["folder-1"]', collector.raw)
        self.assertIn(b"\xff\xd8raw", collector.raw)

        share_url, share_kwargs = session.calls[1]
        self.assertEqual(share_url, "https://www.googleapis.com/drive/v3/files/file-9/permissions")
        self.assertEqual(share_kwargs["json"], {"role": "reader", "type": "anyone"})

    async def test_upload_without_folder_has_no_parents(self):
        session = FakeSession(FakeResponse(payload={"id": "file-9"}), FakeResponse())
        host = self.make_host(session, folder_id=None)

        await host.upload(b"raw", "5_abc.jpg")

        collector = BodyCollector()
        await session.calls[0][1]["data"].write(collector)
        self.assertNotIn(b"parents", collector.raw)

    async def test_upload_http_error(self):
        session = FakeSession(FakeResponse(status=403, text="forbidden"))
        host = self.make_host(session)

        with self.assertRaisesRegex(ImageHostError, "403"):
            await host.upload(b"raw", "5_abc.jpg")
        self.assertEqual(len(session.calls), 1)

    async def test_upload_without_file_id(self):
        session = FakeSession(FakeResponse(payload={}))
        host = self.make_host(session)

        with self.assertRaisesRegex(ImageHostError, "no file id"):
            await host.upload(b"raw", "5_abc.jpg")

    async def test_share_http_error(self):
        session = FakeSession(FakeResponse(payload={"id": "file-9"}), FakeResponse(status=500, text="boom"))
        host = self.make_host(session)

        with self.assertRaisesRegex(ImageHostError, "share failed"):
            await host.upload(b"raw", "5_abc.jpg")

    async def test_client_error_is_wrapped(self):
        session = FakeSession(aiohttp.ClientConnectionError("connection reset"))
        host = self.make_host(session)

        with self.assertRaisesRegex(ImageHostError, "connection reset"):
            await host.upload(b"raw", "5_abc.jpg")

    async def test_close_closes_session(self):
        session = FakeSession()
        host = self.make_host(session)

        await host.close()

        self.assertTrue(session.closed)


if __name__ == "__main__":
    unittest.main()
