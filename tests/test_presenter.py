import os
import sys
import unittest
from unittest.mock import MagicMock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pkgdialog.models import Category, PackageEntry
from pkgdialog.presenter import CategoryPresenter, UserAction
from pkgdialog.selection import SelectionStore


class TestCategoryPresenter(unittest.TestCase):

    def setUp(self):
        self.store = SelectionStore()
        self.ui = MagicMock()
        self.presenter = CategoryPresenter(self.store, self.ui, preselect=True, title="T")
        self.editors = Category("Editors", [PackageEntry("vim", "Vim editor"), PackageEntry("nano", "Nano editor")])
        self.dev = Category("Dev", [PackageEntry("git", "Git"), PackageEntry("vim", "Vim again")])

    def test_first_render_preselects(self):
        self.assertEqual(
            self.presenter.checklist_items(self.editors),
            [("vim", "Vim editor", True), ("nano", "Nano editor", True)],
        )

    def test_confirm_replaces_category_state(self):
        self.ui.render_checklist.return_value = (True, ["vim"])
        self.assertEqual(self.presenter.present(self.editors), UserAction.CONFIRMED)
        self.assertEqual(self.store.snapshot(), {"vim": True, "nano": False})
        self.assertTrue(self.store.is_visited("Editors"))

    def test_title_and_items_passed_to_ui(self):
        self.ui.render_checklist.return_value = (False, [])
        self.presenter.present(self.editors)
        title, text, items = self.ui.render_checklist.call_args[0]
        self.assertEqual(title, "T — Editors")
        self.assertIn("Editors", text)
        self.assertEqual([i[0] for i in items], ["vim", "nano"])

    def test_cancel_leaves_store_but_marks_visited(self):
        self.ui.render_checklist.return_value = (False, [])
        self.assertEqual(self.presenter.present(self.editors), UserAction.CANCELLED)
        self.assertEqual(self.store.snapshot(), {})
        self.assertTrue(self.store.is_visited("Editors"))
        # no re-preselection on the next open
        self.assertEqual(
            [s for _, _, s in self.presenter.checklist_items(self.editors)],
            [False, False],
        )

    def test_second_open_shows_previous_choice(self):
        self.ui.render_checklist.return_value = (True, ["nano"])
        self.presenter.present(self.editors)
        self.assertEqual(
            self.presenter.checklist_items(self.editors),
            [("vim", "Vim editor", False), ("nano", "Nano editor", True)],
        )

    def test_shared_identifier_across_categories(self):
        self.presenter.preselect = False
        self.ui.render_checklist.return_value = (True, ["vim"])
        self.presenter.present(self.editors)
        items = dict((i, s) for i, _, s in self.presenter.checklist_items(self.dev))
        self.assertEqual(items, {"git": False, "vim": True})

    def test_shared_identifier_follows_last_confirm(self):
        self.ui.render_checklist.return_value = (True, ["vim"])
        self.presenter.present(self.editors)
        self.ui.render_checklist.return_value = (True, ["git"])
        self.presenter.present(self.dev)
        self.assertFalse(self.store.is_selected("vim"))

    def test_unknown_ids_ignored(self):
        self.ui.render_checklist.return_value = (True, ["vim", "emacs"])
        self.presenter.present(self.editors)
        self.assertFalse(self.store.has_decision("emacs"))

    def test_visited_even_if_ui_raises(self):
        self.ui.render_checklist.side_effect = RuntimeError("boom")
        with self.assertRaises(RuntimeError):
            self.presenter.present(self.editors)
        self.assertTrue(self.store.is_visited("Editors"))

    def test_placeholders_not_rendered(self):
        cat = Category("Tools", [PackageEntry("git"), PackageEntry("# fzf")])
        self.assertEqual([i[0] for i in self.presenter.checklist_items(cat)], ["git"])


if __name__ == '__main__':
    unittest.main()
