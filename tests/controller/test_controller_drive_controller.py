import json
import os
import tempfile
import unittest
from unittest.mock import Mock, patch

from googleapiclient.errors import HttpError

from gdriveutils.config import DriveConfig
from gdriveutils.controller.drive_controller import GoogleDriveController, RetryPolicy
from gdriveutils.errors import (
    ApiError,
    InvalidArgumentError,
    NotFoundError,
    RateLimitError,
)
from gdriveutils.util.mime import FOLDER_MIME


def _http_error(status: int, reason: str = "", message: str = "", detail_reason: str = "") -> HttpError:
    resp = Mock()
    resp.status = status
    resp.reason = reason
    body = {"error": {"message": message}}
    if detail_reason:
        body["error"]["errors"] = [{"reason": detail_reason, "domain": "usageLimits"}]
    return HttpError(resp=resp, content=json.dumps(body).encode("utf-8"))


class _FakeDownload:
    def __init__(self, fd, request) -> None:
        self._fd = fd
        self._chunks = [b"ab", b"cd"]

    def next_chunk(self):
        self._fd.write(self._chunks.pop(0))
        return None, not self._chunks


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service(self):
        service = Mock()
        files_resource = Mock()
        service.files.return_value = files_resource
        return service, files_resource

    def test_list_files_includes_all_drives_kwargs_and_pages(self) -> None:
        service, files_resource = self._mock_service()
        first, second = Mock(), Mock()
        first.execute.return_value = {
            "files": [{"id": "F1", "name": "a", "mimeType": "text/plain"}],
            "nextPageToken": "T2",
        }
        second.execute.return_value = {"files": [{"id": "F2", "name": "b", "mimeType": FOLDER_MIME}]}
        files_resource.list.side_effect = [first, second]

        controller = GoogleDriveController.from_service(service, supports_all_drives=True)
        results = controller.list_files('"P1" in parents', fields="files(id, name, mimeType)")

        self.assertEqual([r.file_id for r in results], ["F1", "F2"])
        self.assertTrue(results[1].is_folder)

        first_kwargs = files_resource.list.call_args_list[0].kwargs
        self.assertTrue(first_kwargs.get("supportsAllDrives"))
        self.assertTrue(first_kwargs.get("includeItemsFromAllDrives"))
        self.assertEqual(first_kwargs["q"], '"P1" in parents')
        self.assertEqual(first_kwargs["fields"], "nextPageToken, files(id, name, mimeType)")
        self.assertNotIn("pageToken", first_kwargs)
        self.assertEqual(files_resource.list.call_args_list[1].kwargs["pageToken"], "T2")

    def test_supports_all_drives_off(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.return_value = {"id": "F1"}

        controller = GoogleDriveController.from_service(service, supports_all_drives=False)
        controller.get("F1")

        self.assertNotIn("supportsAllDrives", files_resource.get.call_args.kwargs)

    def test_get_fills_missing_id(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.return_value = {"mimeType": "text/plain"}

        controller = GoogleDriveController.from_service(service)
        obj = controller.get("F1", fields="mimeType")

        self.assertEqual(obj.file_id, "F1")
        self.assertEqual(files_resource.get.call_args.kwargs["fields"], "mimeType")

    def test_get_maps_http_404_to_not_found(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.side_effect = _http_error(404, "Not Found", "File not found: X.")

        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError) as ctx:
            controller.get("X")
        self.assertEqual(ctx.exception.details["http"].status_code, 404)
        self.assertEqual(str(ctx.exception), "File not found: X.")

    def test_retry_on_429(self) -> None:
        service, files_resource = self._mock_service()
        req = files_resource.get.return_value
        http_err = _http_error(429, "Too Many Requests", "rate limited", "rateLimitExceeded")

        # Fail twice, then succeed.
        req.execute.side_effect = [
            http_err,
            http_err,
            {"id": "F1", "name": "n", "mimeType": "text/plain", "parents": []},
        ]

        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            info = controller.get("F1")

        self.assertEqual(info.file_id, "F1")
        self.assertEqual(req.execute.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_map_429_to_rate_limit_error_after_retries(self) -> None:
        service, files_resource = self._mock_service()
        req = files_resource.get.return_value
        req.execute.side_effect = _http_error(429, "Too Many Requests", "rate limited")

        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            with self.assertRaises(RateLimitError):
                controller.get("X")
        self.assertEqual(req.execute.call_count, 4)

    def test_5xx_is_retried_and_400_is_not(self) -> None:
        service, files_resource = self._mock_service()
        req = files_resource.get.return_value
        req.execute.side_effect = [_http_error(503, "Service Unavailable"), {"id": "F1"}]

        controller = GoogleDriveController(service, retry_policy=RetryPolicy(max_retries=1))
        with patch("time.sleep", return_value=None):
            self.assertEqual(controller.get("F1").file_id, "F1")

        req.execute.side_effect = _http_error(400, "Bad Request", "Invalid query")
        req.execute.reset_mock()
        with self.assertRaises(InvalidArgumentError):
            controller.get("F1")
        self.assertEqual(req.execute.call_count, 1)

    def test_unknown_resource_or_method(self) -> None:
        service = Mock(spec=["files"])
        service.files.return_value = Mock(spec=["list"])
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(InvalidArgumentError):
            controller.call("about", "get")
        with self.assertRaises(InvalidArgumentError):
            controller.call("files", "explode")

    def test_throttle_waits_before_each_attempt(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.side_effect = [_http_error(500, "Error"), {"id": "F1"}]
        throttle = Mock()

        controller = GoogleDriveController(service, throttle=throttle)
        with patch("time.sleep", return_value=None):
            controller.get("F1")
        self.assertEqual(throttle.wait.call_count, 2)

    def test_update_passes_parents(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.update.return_value.execute.return_value = {"id": "F1", "parents": ["N"]}

        controller = GoogleDriveController.from_service(service)
        obj = controller.update("F1", add_parents="N", remove_parents="O1,O2")

        kwargs = files_resource.update.call_args.kwargs
        self.assertEqual(kwargs["addParents"], "N")
        self.assertEqual(kwargs["removeParents"], "O1,O2")
        self.assertNotIn("body", kwargs)
        self.assertEqual(obj.parents, ["N"])

    def test_create_folder_body(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.create.return_value.execute.return_value = {"id": "D1", "mimeType": FOLDER_MIME}

        controller = GoogleDriveController.from_service(service)
        folder = controller.create_folder("New", "P1")

        self.assertEqual(folder.file_id, "D1")
        self.assertEqual(
            files_resource.create.call_args.kwargs["body"],
            {"name": "New", "mimeType": FOLDER_MIME, "parents": ["P1"]},
        )

    def test_upload_file_uses_resumable_media(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.create.return_value.execute.return_value = {"id": "U1", "name": "a.txt"}

        controller = GoogleDriveController.from_service(service)
        with patch("googleapiclient.http.MediaFileUpload") as media_cls:
            obj = controller.upload_file("/tmp/a.txt", "P1", mime_type="text/plain")

        media_cls.assert_called_once_with("/tmp/a.txt", mimetype="text/plain", resumable=True)
        kwargs = files_resource.create.call_args.kwargs
        self.assertIs(kwargs["media_body"], media_cls.return_value)
        self.assertEqual(kwargs["body"], {"name": "a.txt", "mimeType": "text/plain", "parents": ["P1"]})
        self.assertEqual(obj.file_id, "U1")

    def test_download_file_streams_chunks(self) -> None:
        service, files_resource = self._mock_service()
        controller = GoogleDriveController.from_service(service)

        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("googleapiclient.http.MediaIoBaseDownload", _FakeDownload):
                controller.download_file("F1", target)
            with open(target, "rb") as f:
                self.assertEqual(f.read(), b"abcd")

        self.assertEqual(files_resource.get_media.call_args.kwargs["fileId"], "F1")

    def test_download_failure_removes_partial_file(self) -> None:
        service, _ = self._mock_service()
        controller = GoogleDriveController.from_service(service)
        downloader = Mock()
        downloader.next_chunk.side_effect = _http_error(404, "Not Found")

        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("googleapiclient.http.MediaIoBaseDownload", return_value=downloader):
                with self.assertRaises(NotFoundError):
                    controller.download_file("F1", target)
            self.assertFalse(os.path.exists(target))

    def test_unexpected_exception_becomes_api_error(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.delete.return_value.execute.side_effect = ValueError("boom")

        controller = GoogleDriveController.from_service(service)
        with self.assertRaises(ApiError):
            controller.delete("F1")


class TestDriveControllerFromConfig(unittest.TestCase):
    def test_from_config_wires_policy_and_throttle(self) -> None:
        config = DriveConfig(max_retries=5, initial_delay_sec=0.5, throttle_requests=4)
        oauth = Mock()

        controller = GoogleDriveController.from_config(config, oauth_client=oauth)

        oauth.get_credentials.assert_called_once_with(ensure_valid=True)
        oauth.build_drive_service.assert_called_once_with(oauth.get_credentials.return_value)
        self.assertIs(controller.credentials, oauth.get_credentials.return_value)
        self.assertEqual(controller._retry_policy, RetryPolicy(5, 0.5))
        self.assertEqual(controller._throttle.max_calls, 4)


if __name__ == "__main__":
    unittest.main()
