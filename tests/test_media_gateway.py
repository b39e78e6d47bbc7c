"""Tests for :mod:`unida.service.media_gateway`."""

import asyncio
from unittest import TestCase, mock

from cloudinary.exceptions import Error as CloudinaryError

from tests.util import PDF_BYTES, PNG_BYTES, TEXT_BYTES
from unida.exceptions import UploadError
from unida.service.media_gateway import CloudinaryGateway, sniff


class TestSniff(TestCase):
    def test_signatures(self):
        self.assertEqual(sniff(PDF_BYTES), "pdf")
        self.assertEqual(sniff(PNG_BYTES), "image")
        self.assertEqual(sniff(b"\xff\xd8\xff\xe0rest"), "image")
        self.assertEqual(sniff(b"GIF89a..."), "image")
        self.assertEqual(sniff(b"RIFF\x00\x00\x00\x00WEBPVP8 "), "image")
        self.assertIsNone(sniff(TEXT_BYTES))
        self.assertIsNone(sniff(b""))


class TestCheck(TestCase):
    """Content checks happen before any network call."""

    def setUp(self):
        self.gateway = CloudinaryGateway(
            cloud_name="demo", api_key="key", api_secret="secret",
            folder="unida_papers", max_bytes=1024,
        )

    def test_accepts_pdf(self):
        self.assertEqual(self.gateway.check(PDF_BYTES, "paper.PDF", "pdf").formats, ("pdf",))

    def test_rejects_text_renamed_to_pdf(self):
        with self.assertRaises(UploadError) as ctx:
            self.gateway.check(TEXT_BYTES, "paper.pdf", "pdf")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_rejects_wrong_extension(self):
        with self.assertRaises(UploadError):
            self.gateway.check(PDF_BYTES, "paper.txt", "pdf")

    def test_rejects_too_large(self):
        with self.assertRaises(UploadError) as ctx:
            self.gateway.check(b"%PDF-" + b"0" * 2048, "big.pdf", "pdf")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_rejects_unknown_kind_and_empty(self):
        with self.assertRaises(UploadError):
            self.gateway.check(PDF_BYTES, "paper.pdf", "video")
        with self.assertRaises(UploadError):
            self.gateway.check(b"", "paper.pdf", "pdf")


class TestCloudinaryGateway(TestCase):
    def setUp(self):
        self.gateway = CloudinaryGateway(
            cloud_name="demo", api_key="key", api_secret="secret",
            folder="unida_papers",
        )

    @mock.patch("cloudinary.uploader.upload")
    def test_store(self, mock_upload):
        mock_upload.return_value = {
            "secure_url": "https://res.cloudinary.com/demo/image/upload/unida_papers/paper.pdf",
            "public_id": "unida_papers/paper",
            "resource_type": "image",
        }

        stored = asyncio.run(self.gateway.store(PDF_BYTES, "paper.pdf", "pdf"))

        self.assertEqual(stored.url, "https://res.cloudinary.com/demo/image/upload/unida_papers/paper.pdf")
        self.assertEqual(stored.handle, "image:unida_papers/paper")
        _, kwargs = mock_upload.call_args
        self.assertEqual(kwargs["folder"], "unida_papers")
        self.assertEqual(kwargs["resource_type"], "auto")
        self.assertEqual(kwargs["allowed_formats"], ["pdf"])

    @mock.patch("cloudinary.uploader.upload")
    def test_store_avatar_subfolder(self, mock_upload):
        mock_upload.return_value = {
            "secure_url": "https://res.cloudinary.com/demo/a.png",
            "public_id": "unida_papers/avatars/a",
            "resource_type": "image",
        }
        asyncio.run(self.gateway.store(PNG_BYTES, "a.png", "image"))
        _, kwargs = mock_upload.call_args
        self.assertEqual(kwargs["folder"], "unida_papers/avatars")

    @mock.patch("cloudinary.uploader.upload")
    def test_store_rejected_without_network(self, mock_upload):
        with self.assertRaises(UploadError):
            asyncio.run(self.gateway.store(TEXT_BYTES, "notes.pdf", "pdf"))
        mock_upload.assert_not_called()

    @mock.patch("cloudinary.uploader.upload")
    def test_store_failure_is_server_error(self, mock_upload):
        mock_upload.side_effect = CloudinaryError("boom")
        with self.assertRaises(UploadError) as ctx:
            asyncio.run(self.gateway.store(PDF_BYTES, "paper.pdf", "pdf"))
        self.assertEqual(ctx.exception.status_code, 500)

    @mock.patch("cloudinary.uploader.destroy")
    def test_remove(self, mock_destroy):
        mock_destroy.return_value = {"result": "ok"}
        self.assertTrue(asyncio.run(self.gateway.remove("raw:unida_papers/paper")))
        args, kwargs = mock_destroy.call_args
        self.assertEqual(args, ("unida_papers/paper",))
        self.assertEqual(kwargs["resource_type"], "raw")

    @mock.patch("cloudinary.uploader.destroy")
    def test_remove_absent(self, mock_destroy):
        mock_destroy.return_value = {"result": "not found"}
        self.assertFalse(asyncio.run(self.gateway.remove("image:gone")))

    @mock.patch("cloudinary.uploader.destroy")
    def test_remove_failure(self, mock_destroy):
        mock_destroy.side_effect = CloudinaryError("boom")
        with self.assertRaises(UploadError):
            asyncio.run(self.gateway.remove("image:x"))

    def test_split_handle(self):
        self.assertEqual(CloudinaryGateway.split_handle("raw:a/b:c"), ("raw", "a/b:c"))
        self.assertEqual(CloudinaryGateway.split_handle("legacy_id"), ("image", "legacy_id"))
