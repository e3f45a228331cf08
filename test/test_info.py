"""
Build information tests.

Conventions
- Test method names follow CamelCase per project convention.
- Distribution metadata is replaced with unittest.mock; nothing depends on
  what happens to be installed.
"""

from __future__ import annotations

import json
import platform
import unittest
from importlib import metadata
from unittest import TestCase, mock

from cmdtree import BuildInfo, build_info


class Distribution:
    """Stand-in for importlib.metadata.Distribution."""

    def __init__(self, version, direct_url=None):
        self.version = version
        self.direct_url = direct_url

    def read_text(self, filename):
        return self.direct_url if filename == "direct_url.json" else None


class TestBuildInfo(TestCase):

    def lookup(self, distribution):
        return mock.patch.object(metadata, "distribution", return_value=distribution)

    def testNotInstalled(self):
        with mock.patch.object(metadata, "distribution", side_effect=metadata.PackageNotFoundError("nope")):
            info = build_info("nope")
        self.assertEqual(info, BuildInfo(platform.python_version(), "(devel)", "SNAPSHOT"))
        self.assertEqual(str(info), "(devel)-SNAPSHOT")

    def testInstalledFromIndex(self):
        with self.lookup(Distribution("1.2.0")):
            info = build_info("myapp")
        self.assertEqual(info.version, "1.2.0")
        self.assertEqual(info.revision, "SNAPSHOT")
        self.assertEqual(info.python, platform.python_version())

    def testInstalledFromVcs(self):
        direct_url = json.dumps({
            "url": "https://example.invalid/myapp.git",
            "vcs_info": {"vcs": "git", "commit_id": "3f2a9c1"},
        })
        with self.lookup(Distribution("1.2.0", direct_url)):
            info = build_info("myapp")
        self.assertEqual(str(info), "1.2.0-3f2a9c1")

    def testLocalDirectory(self):
        direct_url = json.dumps({"url": "file:///src/myapp", "dir_info": {"editable": True}})
        with self.lookup(Distribution("0.1.0", direct_url)):
            self.assertEqual(build_info("myapp").revision, "SNAPSHOT")

    def testUnreadableDirectUrl(self):
        with self.lookup(Distribution("0.1.0", "{not json")):
            self.assertEqual(build_info("myapp").revision, "SNAPSHOT")

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            build_info(None)


if __name__ == "__main__":
    unittest.main()
