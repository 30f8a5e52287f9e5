"""
Merkle Tree API Client Tests

The requests session is stubbed, so no server is needed.
"""

import os
import unittest
from unittest import mock

import requests

from merkle_tree.api.tree_client import TreeAPIClient, TreeAPIError
from merkle_tree.models import SiblingModel


def fake_response(status_code=200, body=None):
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = b"" if body is None else b"{}"
    response.json.return_value = body
    return response


class TestTreeAPIClient(unittest.TestCase):

    def setUp(self):
        self.client = TreeAPIClient("http://merkle.test/", timeout=5)

    def test_base_url_from_argument(self):
        self.assertEqual(self.client.base_url, "http://merkle.test")
        self.assertEqual(self.client.timeout, 5)

    def test_base_url_from_environment(self):
        with mock.patch.dict(os.environ, {"MERKLE_TREE_API_URL": "http://env.test:9000/"}):
            client = TreeAPIClient()
        self.assertEqual(client.base_url, "http://env.test:9000")

    def test_create_tree(self):
        body = {"name": "t", "leaf_count": 2, "depth": 1, "root": "0x" + "11" * 32}
        with mock.patch.object(self.client.session, "request", return_value=fake_response(201, body)) as request:
            summary = self.client.create_tree("t", ["a", "b"])

        self.assertEqual(summary.leaf_count, 2)
        request.assert_called_once_with(
            "POST", "http://merkle.test/trees", json={"name": "t", "elements": ["a", "b"]}, timeout=5
        )

    def test_tree_name_is_path_quoted(self):
        body = {"name": "a/b c", "leaf_count": 1, "depth": 0, "root": "0x" + "11" * 32}
        with mock.patch.object(self.client.session, "request", return_value=fake_response(200, body)) as request:
            self.client.get_tree("a/b c")
            self.client.add_elements("a/b c", ["x"])

        urls = [call.args[1] for call in request.call_args_list]
        self.assertEqual(urls, [
            "http://merkle.test/trees/a%2Fb%20c",
            "http://merkle.test/trees/a%2Fb%20c/elements",
        ])

    def test_get_proof(self):
        body = {
            "element": "a",
            "leaf": "0x" + "aa" * 32,
            "root": "0x" + "cc" * 32,
            "proof": [{"digest": "0x" + "bb" * 32, "side": "right"}],
        }
        with mock.patch.object(self.client.session, "request", return_value=fake_response(200, body)):
            proof = self.client.get_proof("t", "a")
        self.assertEqual(proof.proof[0].to_sibling().digest, b"\xbb" * 32)

    def test_verify_sends_serialized_steps(self):
        step = SiblingModel(digest="0x" + "bb" * 32, side="left")
        body = {"element": "a", "valid": True, "root": "0x" + "cc" * 32}
        with mock.patch.object(self.client.session, "request", return_value=fake_response(200, body)) as request:
            result = self.client.verify("t", "a", [step])

        self.assertTrue(result.valid)
        payload = request.call_args.kwargs["json"]
        self.assertEqual(payload["proof"], [{"digest": "0x" + "bb" * 32, "side": "left"}])

    def test_error_response_raises(self):
        body = {"error": "Tree 'x' not found", "code": "TREE_NOT_FOUND"}
        with mock.patch.object(self.client.session, "request", return_value=fake_response(404, body)):
            with self.assertRaises(TreeAPIError) as ctx:
                self.client.get_tree("x")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.code, "TREE_NOT_FOUND")
        self.assertIn("not found", str(ctx.exception))

    def test_connection_error_raises(self):
        with mock.patch.object(self.client.session, "request", side_effect=requests.ConnectionError("refused")):
            with self.assertRaises(TreeAPIError):
                self.client.list_trees()

    def test_health_check(self):
        with mock.patch.object(self.client.session, "request", return_value=fake_response(200, {"status": "healthy"})):
            self.assertTrue(self.client.health_check())
        with mock.patch.object(self.client.session, "request", side_effect=requests.Timeout("slow")):
            self.assertFalse(self.client.health_check())

    def test_delete_returns_none(self):
        with mock.patch.object(self.client.session, "request", return_value=fake_response(204)):
            self.assertIsNone(self.client.delete_tree("t"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
