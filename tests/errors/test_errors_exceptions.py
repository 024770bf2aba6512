import unittest

from gdriveutils.errors.exceptions import (
    AggregateTransferError,
    AmbiguousIdentifierError,
    ApiError,
    AuthError,
    ConflictError,
    GDriveUtilsError,
    HttpErrorInfo,
    IdentifierError,
    IdentifierNotFoundError,
    InvalidArgumentError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)
from gdriveutils.models import TransferFailure


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = GDriveUtilsError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_map_http_error_basic(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=404, message="not found"))
        self.assertIsInstance(err, NotFoundError)

        err = map_http_error(HttpErrorInfo(status_code=400, message="bad req"))
        self.assertIsInstance(err, InvalidArgumentError)

        err = map_http_error(HttpErrorInfo(status_code=429, message="rate"))
        self.assertIsInstance(err, RateLimitError)

        err = map_http_error(HttpErrorInfo(status_code=409, message="conflict"))
        self.assertIsInstance(err, ConflictError)

        err = map_http_error(HttpErrorInfo(status_code=401, message="auth"))
        self.assertIsInstance(err, AuthError)

    def test_map_http_error_403_quota_vs_permission(self) -> None:
        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="quotaExceeded", message="quota")
        )
        self.assertIsInstance(err, QuotaExceededError)

        err = map_http_error(
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="x")
        )
        self.assertIsInstance(err, PermissionError)

    def test_map_http_error_5xx_is_api_error(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=503, message="unavail"))
        self.assertIsInstance(err, ApiError)

    def test_map_http_error_keeps_info(self) -> None:
        info = HttpErrorInfo(status_code=418, message="teapot")
        err = map_http_error(info)
        self.assertIsInstance(err, ApiError)
        self.assertIs(err.details["http"], info)
        self.assertEqual(str(err), "teapot")

    def test_map_http_error_without_message(self) -> None:
        err = map_http_error(HttpErrorInfo(status_code=502))
        self.assertEqual(str(err), "HTTP error 502")


class TestIdentifierErrors(unittest.TestCase):
    def test_hierarchy(self) -> None:
        self.assertTrue(issubclass(IdentifierNotFoundError, IdentifierError))
        self.assertTrue(issubclass(IdentifierNotFoundError, NotFoundError))
        self.assertTrue(issubclass(AmbiguousIdentifierError, IdentifierError))
        self.assertFalse(issubclass(AmbiguousIdentifierError, NotFoundError))


class TestAggregateTransferError(unittest.TestCase):
    def test_message_lists_every_failure(self) -> None:
        http = map_http_error(HttpErrorInfo(status_code=500, message="Backend Error"))
        failures = [
            TransferFailure.from_exception("out/a.txt", http, file_id="F1"),
            TransferFailure.from_exception("src/b.exe", OSError("unreadable")),
        ]
        err = AggregateTransferError(failures, details={"file_id": "TOP"})

        self.assertEqual(err.failures, failures)
        self.assertEqual(err.details["file_id"], "TOP")
        self.assertEqual(
            str(err).splitlines(),
            [
                "2 item(s) failed to transfer:",
                "  out/a.txt (id: F1): ApiError: Backend Error [HTTP 500 Backend Error]",
                "  src/b.exe: OSError: unreadable",
            ],
        )


if __name__ == "__main__":
    unittest.main()
