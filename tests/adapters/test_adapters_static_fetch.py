import unittest
from unittest.mock import Mock

import requests

from mediavault.adapters import StaticFetchAdapter, github_raw_url
from mediavault.errors import (
    AdapterUnavailableError,
    InvalidInputError,
    InvalidOperationError,
    NotFoundError,
)
from mediavault.models import ROOT_ID, Snapshot


def _response(status: int = 200, payload=None, json_error: bool = False) -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.reason = "OK" if resp.ok else "Error"
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class TestStaticFetchAdapter(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Mock()
        self.adapter = StaticFetchAdapter(
            "https://raw.githubusercontent.com/me/vault/main/",
            "/data/media-vault.json",
            timeout=3.0,
            session=self.session,
        )

    def test_url_join(self) -> None:
        self.assertEqual(
            self.adapter.url,
            "https://raw.githubusercontent.com/me/vault/main/data/media-vault.json",
        )
        self.assertEqual(
            github_raw_url("me", "vault"),
            "https://raw.githubusercontent.com/me/vault/main",
        )

    def test_load_success(self) -> None:
        self.session.get.return_value = _response(payload=Snapshot.default().to_dict())
        snap = self.adapter.load()
        self.assertIn(ROOT_ID, snap.folders)
        self.session.get.assert_called_once_with(
            self.adapter.url,
            timeout=3.0,
            headers={"Cache-Control": "no-cache"},
        )

    def test_network_failure(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("down")
        with self.assertRaises(AdapterUnavailableError) as ctx:
            self.adapter.load()
        self.assertEqual(ctx.exception.details["url"], self.adapter.url)

    def test_missing_file(self) -> None:
        self.session.get.return_value = _response(status=404)
        with self.assertRaises(NotFoundError):
            self.adapter.load()

    def test_server_error(self) -> None:
        self.session.get.return_value = _response(status=503)
        with self.assertRaises(AdapterUnavailableError):
            self.adapter.load()

    def test_invalid_json(self) -> None:
        self.session.get.return_value = _response(json_error=True)
        with self.assertRaises(InvalidInputError):
            self.adapter.load()

    def test_save_is_noop(self) -> None:
        self.assertTrue(self.adapter.read_only)
        self.adapter.save(Snapshot.default())
        self.session.assert_not_called()
        self.session.get.assert_not_called()

    def test_subscribe_not_supported(self) -> None:
        with self.assertRaises(InvalidOperationError):
            self.adapter.subscribe(lambda snap: None)

    def test_base_url_required(self) -> None:
        with self.assertRaises(ValueError):
            StaticFetchAdapter("")


if __name__ == "__main__":
    unittest.main()
