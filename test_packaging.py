import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent
FIND_KEYS = {"where", "include", "exclude", "namespaces"}


@unittest.skipIf(sys.version_info < (3, 11), "tomllib needs Python 3.11")
class TestPackaging(unittest.TestCase):

    def setUp(self):
        import tomllib

        with (REPO_ROOT / "pyproject.toml").open("rb") as f:
            self.pyproject = tomllib.load(f)

    def test_package_discovery_uses_known_keys(self):
        find = self.pyproject["tool"]["setuptools"]["packages"]["find"]
        self.assertLessEqual(set(find), FIND_KEYS)
        self.assertTrue(find["namespaces"])
        self.assertEqual(find["include"], ["credential_flatfile*"])

    def test_helper_executable_is_declared(self):
        scripts = self.pyproject["project"]["scripts"]
        self.assertEqual(scripts["docker-credential-flatfile"], "credential_flatfile.main:app")


if __name__ == '__main__':
    unittest.main()
