import unittest

from drive_fakes import FakeDriveController
from gdriveutils.errors import IdentifierNotFoundError, InvalidArgumentError, NotFoundError
from gdriveutils.mutators import DriveMutator
from gdriveutils.resolver import IdentifierResolver


class TestDriveMutator(unittest.TestCase):
    def setUp(self) -> None:
        self.ctrl = FakeDriveController()
        self.src = self.ctrl.add_folder("Src")
        self.dst = self.ctrl.add_folder("Dst")
        self.doc = self.ctrl.add("doc.txt", self.src)
        self.resolver = IdentifierResolver(self.ctrl)
        self.mutator = DriveMutator(self.ctrl, self.resolver)

    def test_rename_keeps_id(self) -> None:
        obj = self.mutator.rename("Src/doc.txt", "renamed.txt")
        self.assertEqual(obj.file_id, self.doc)
        self.assertEqual(self.ctrl.objects[self.doc]["name"], "renamed.txt")
        self.assertEqual(self.resolver.get_file_id({"file_name": "renamed.txt", "parent_id": self.src}), self.doc)

    def test_rename_requires_name(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.mutator.rename(self.doc, "")
        self.assertEqual(self.ctrl.calls, [])

    def test_move_reparents(self) -> None:
        self.mutator.move("Src/doc.txt", "Dst/")
        self.assertEqual(self.ctrl.objects[self.doc]["parents"], [self.dst])
        self.assertEqual(self.resolver.resolve_id("Dst/doc.txt"), self.doc)
        self.assertEqual(self.ctrl.children(self.src), [])

    def test_move_into_parent_name_descriptor(self) -> None:
        self.mutator.move({"fileName": "doc.txt"}, {"parentName": "Dst"})
        self.assertEqual(self.ctrl.objects[self.doc]["parents"], [self.dst])

    def test_move_into_parent_id_descriptor(self) -> None:
        self.mutator.move(self.doc, {"parent_id": self.dst})
        self.assertEqual(self.ctrl.objects[self.doc]["parents"], [self.dst])

    def test_move_defaults_to_root(self) -> None:
        self.mutator.move(self.doc)
        self.assertEqual(self.ctrl.objects[self.doc]["parents"], ["root"])

    def test_move_sends_one_update(self) -> None:
        self.mutator.move(self.doc, self.dst)
        updates = [c for c in self.ctrl.calls if c[0] == "update"]
        self.assertEqual(updates, [("update", self.doc, None, self.dst, self.src)])

    def test_move_removes_every_old_parent(self) -> None:
        self.ctrl.objects[self.doc]["parents"].append(self.dst)
        other = self.ctrl.add_folder("Other")
        self.mutator.move(self.doc, other)
        self.assertEqual(self.ctrl.objects[self.doc]["parents"], [other])

    def test_move_into_current_parent_removes_nothing(self) -> None:
        self.mutator.move(self.doc, self.src)
        update = [c for c in self.ctrl.calls if c[0] == "update"][0]
        self.assertIsNone(update[4])

    def test_delete_then_list_is_empty(self) -> None:
        self.mutator.delete("Src/")
        self.assertNotIn(self.src, self.ctrl.objects)
        self.assertNotIn(self.doc, self.ctrl.objects)
        with self.assertRaises(IdentifierNotFoundError):
            self.resolver.resolve_id("Src/doc.txt")
        self.assertEqual(self.resolver.list_files('name = "doc.txt"'), [])

    def test_delete_unknown_id(self) -> None:
        with self.assertRaises(NotFoundError):
            self.mutator.delete("NOPE")


if __name__ == "__main__":
    unittest.main()
