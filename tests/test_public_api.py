import unittest

import gdriveutils


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(gdriveutils, "GoogleDriveUtils"))
        self.assertTrue(hasattr(gdriveutils, "GoogleDriveController"))
        self.assertTrue(hasattr(gdriveutils, "DriveConfig"))
        self.assertTrue(hasattr(gdriveutils, "OAuthClient"))

        self.assertTrue(hasattr(gdriveutils, "RemoteObject"))
        self.assertTrue(hasattr(gdriveutils, "BatchRequest"))
        self.assertTrue(hasattr(gdriveutils, "ByDescriptor"))

        self.assertTrue(hasattr(gdriveutils, "GDriveUtilsError"))
        self.assertTrue(hasattr(gdriveutils, "AggregateTransferError"))
        self.assertTrue(hasattr(gdriveutils, "IdentifierNotFoundError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(gdriveutils, "__all__"))
        self.assertIn("GoogleDriveUtils", gdriveutils.__all__)
        self.assertIn("GDriveUtilsError", gdriveutils.__all__)
        for name in gdriveutils.__all__:
            self.assertTrue(hasattr(gdriveutils, name), name)


if __name__ == "__main__":
    unittest.main()
