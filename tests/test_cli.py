"""
CLI Tests
"""

import json
import os
import unittest
from unittest import mock

from click.testing import CliRunner

from merkle_tree import MerkleTree
from merkle_tree.cli import cli
from merkle_tree.models import ProofResponse, TreeSummary


class TestLocalCommands(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()

    def test_build_json(self):
        result = self.runner.invoke(cli, ["build", "a", "b", "c", "d", "--format", "json"])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["leaf_count"], 4)
        self.assertEqual(data["root"], "0x" + MerkleTree(["a", "b", "c", "d"]).root_hex)

    def test_build_without_elements_fails(self):
        result = self.runner.invoke(cli, ["build"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("zero elements", result.output)

    def test_build_from_file(self):
        with self.runner.isolated_filesystem():
            with open("elements.txt", "w") as f:
                f.write("b\n\nc\n")
            result = self.runner.invoke(cli, ["build", "a", "--file", "elements.txt", "--format", "json"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(json.loads(result.output)["root"], "0x" + MerkleTree(["a", "b", "c"]).root_hex)

    def test_add(self):
        result = self.runner.invoke(cli, ["add", "a", "b", "c", "d", "-e", "e", "--format", "json"])
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.output)
        self.assertEqual(data["leaf_count"], 5)
        self.assertEqual(data["old_root"], "0x" + MerkleTree(["a", "b", "c", "d"]).root_hex)
        self.assertEqual(data["new_root"], "0x" + MerkleTree(["a", "b", "c", "d", "e"]).root_hex)

    def test_prove_and_verify(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(cli, ["prove", "c", "a", "b", "c"])
            self.assertEqual(result.exit_code, 0, result.output)
            proof = ProofResponse(**json.loads(result.output))
            self.assertEqual(proof.proof[0].digest, proof.leaf)
            with open("proof.json", "w") as f:
                f.write(result.output)

            against_tree = self.runner.invoke(cli, ["verify", "c", "a", "b", "c", "--proof", "proof.json"])
            self.assertEqual(against_tree.exit_code, 0, against_tree.output)

            against_file_root = self.runner.invoke(cli, ["verify", "c", "--proof", "proof.json"])
            self.assertEqual(against_file_root.exit_code, 0, against_file_root.output)

            wrong_element = self.runner.invoke(cli, ["verify", "a", "a", "b", "c", "--proof", "proof.json"])
            self.assertEqual(wrong_element.exit_code, 1)

            grown_tree = self.runner.invoke(cli, ["verify", "c", "a", "b", "c", "d", "--proof", "proof.json"])
            self.assertEqual(grown_tree.exit_code, 1)

    def test_verify_bare_list_with_root(self):
        tree = MerkleTree(["a", "b"])
        steps = [s.to_dict() for s in tree.generate_proof("a")]
        result = self.runner.invoke(
            cli, ["verify", "a", "--proof", "-", "--root", tree.root_hex], input=json.dumps(steps)
        )
        self.assertEqual(result.exit_code, 0, result.output)

    def test_verify_rejects_bad_json(self):
        result = self.runner.invoke(cli, ["verify", "a", "a", "--proof", "-"], input="not json")
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("not valid JSON", result.output)

    def test_prove_missing_element(self):
        result = self.runner.invoke(cli, ["prove", "x", "a", "b"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("not in the tree", result.output)

    def test_visualize(self):
        result = self.runner.invoke(cli, ["visualize", "a", "b", "c", "-e", "c"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Merkle Tree", result.output)
        self.assertIn("(dup)", result.output)


class TestRemoteCommands(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        patcher = mock.patch("merkle_tree.cli.TreeAPIClient")
        self.client_cls = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = self.client_cls.return_value

    def test_remote_create_uses_api_url(self):
        self.client.create_tree.return_value = TreeSummary(name="t", leaf_count=2, depth=1, root="0x" + "11" * 32)
        result = self.runner.invoke(cli, ["--api-url", "http://api.test", "remote", "create", "t", "a", "b"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.client_cls.assert_called_once_with("http://api.test")
        self.client.create_tree.assert_called_once_with("t", ["a", "b"])
        self.assertEqual(json.loads(result.output)["leaf_count"], 2)

    def test_remote_error_becomes_click_exception(self):
        from merkle_tree.api.tree_client import TreeAPIError

        self.client.get_proof.side_effect = TreeAPIError("Tree 't' not found", 404, "TREE_NOT_FOUND")
        result = self.runner.invoke(cli, ["remote", "prove", "t", "a"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not found", result.output)

    def test_remote_health_unhealthy_exits_nonzero(self):
        self.client.health_check.return_value = False
        self.client.base_url = "http://api.test"
        result = self.runner.invoke(cli, ["remote", "health"])
        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
