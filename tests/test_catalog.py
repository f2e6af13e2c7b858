import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pkgdialog.catalog import (
    find_config,
    load_catalog,
    load_config,
    parse_categories,
    parse_entry,
    shared_identifiers,
)
from pkgdialog.errors import ConfigMissing, InvalidCatalog
from pkgdialog.models import Backend


class TestParsing(unittest.TestCase):

    def test_parse_entry_pipe_form(self):
        e = parse_entry("vim|Vim editor")
        self.assertEqual(e.name, "vim")
        self.assertEqual(e.desc, "Vim editor")

    def test_parse_entry_without_description(self):
        e = parse_entry("htop")
        self.assertEqual((e.name, e.desc), ("htop", ""))

    def test_parse_entry_dict_form(self):
        e = parse_entry({"name": " nano ", "desc": "Nano"})
        self.assertEqual((e.name, e.desc), ("nano", "Nano"))

    def test_parse_entry_rejects_other_types(self):
        self.assertIsNone(parse_entry(42))

    def test_backend_by_name_convention(self):
        cats = parse_categories({"categories": [
            {"name": "Editors", "items": ["vim|Vim"]},
            {"name": "AUR", "items": ["yay-extra|x"]},
            {"name": "FLATPAK", "items": ["org.app.One|App"]},
        ]})
        self.assertEqual([c.backend for c in cats], [Backend.REPO, Backend.AUR, Backend.FLATPAK])

    def test_explicit_backend_wins(self):
        cats = parse_categories({"categories": [
            {"name": "Browsers", "backend": "flatpak", "items": []},
        ]})
        self.assertEqual(cats[0].backend, Backend.FLATPAK)

    def test_unknown_backend(self):
        with self.assertRaises(InvalidCatalog):
            parse_categories({"categories": [{"name": "X", "backend": "snap"}]})

    def test_description_defaults_to_name(self):
        cats = parse_categories({"categories": [{"name": "Games"}]})
        self.assertEqual(cats[0].desc, "Games")
        self.assertEqual(cats[0].items, [])

    def test_reserved_names_rejected(self):
        for name in ("INSTALL", "CLEAR", "QUIT"):
            with self.assertRaises(InvalidCatalog):
                parse_categories({"categories": [{"name": name}]})

    def test_duplicate_category_rejected(self):
        with self.assertRaises(InvalidCatalog):
            parse_categories({"categories": [{"name": "A"}, {"name": "A"}]})

    def test_placeholders_kept_but_not_listed(self):
        cats = parse_categories({"categories": [
            {"name": "Tools", "items": ["git|Git", "# fzf|off", "   ", "|no name"]},
        ]})
        self.assertEqual(len(cats[0].items), 4)
        self.assertEqual([e.name for e in cats[0].entries()], ["git"])

    def test_shared_identifiers(self):
        cats = parse_categories({"categories": [
            {"name": "A", "items": ["git", "vim"]},
            {"name": "B", "items": ["git", "nano"]},
        ]})
        self.assertEqual(shared_identifiers(cats), {"git": ["A", "B"]})


class TestLoading(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_defaults_filled(self):
        path = self._write("p.json", json.dumps({"categories": [{"name": "A", "items": ["x"]}]}))
        cfg = load_config(path)
        self.assertTrue(cfg["preselect_first_visit"])
        self.assertEqual(cfg["flatpak"]["remote"], "flathub")
        self.assertFalse(cfg["pacman"]["noconfirm"])
        self.assertIn("title", cfg["ui"])

    def test_partial_section_keeps_user_values(self):
        path = self._write("p.json", json.dumps({"pacman": {"noconfirm": True}, "categories": []}))
        cfg = load_config(path)
        self.assertTrue(cfg["pacman"]["noconfirm"])
        self.assertTrue(cfg["pacman"]["sync_before_install"])

    def test_invalid_json(self):
        path = self._write("p.json", "{nope")
        with self.assertRaises(InvalidCatalog):
            load_config(path)

    def test_empty_file(self):
        path = self._write("p.json", "  \n")
        with self.assertRaises(InvalidCatalog):
            load_config(path)

    def test_catalog_without_categories(self):
        path = self._write("p.json", "{}")
        with self.assertRaises(InvalidCatalog):
            load_catalog(path)

    def test_missing_file_is_config_missing(self):
        with self.assertRaises(ConfigMissing):
            load_config(os.path.join(self.tmp.name, "absent.json"))

    def test_find_config_explicit(self):
        path = self._write("mine.json", "{}")
        self.assertEqual(find_config(path), path)
        with self.assertRaises(ConfigMissing):
            find_config(os.path.join(self.tmp.name, "other.json"))

    def test_find_config_from_env(self):
        path = self._write("env.json", "{}")
        with patch.dict(os.environ, {"PKGDIALOG_CONFIG": path}):
            self.assertEqual(find_config(None), path)

    def test_find_config_script_dir(self):
        path = self._write("packages.json", "{}")
        with patch.dict(os.environ, {"PKGDIALOG_CONFIG": ""}), \
                patch("pkgdialog.catalog.os.getcwd", return_value=os.path.join(self.tmp.name, "nowhere")):
            self.assertEqual(find_config(None, script_dir=self.tmp.name), path)

    def test_find_config_nothing_found(self):
        with patch.dict(os.environ, {"PKGDIALOG_CONFIG": ""}), \
                patch("pkgdialog.catalog.config_candidates", return_value=[os.path.join(self.tmp.name, "x.json")]):
            with self.assertRaises(ConfigMissing):
                find_config(None)


if __name__ == '__main__':
    unittest.main()
