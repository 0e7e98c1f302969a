import json
from unittest.mock import Mock, patch

import pytest

from esindex.cli.index_manager import build_parser, main
from esindex.index.exceptions import IndexDeleteError
from esindex.index.models import LifecycleResult


class TestIndexManagerCLI:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_update_requires_physical_id(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["update"])

    @patch("esindex.handlers.factory.create_controller")
    def test_create(self, mock_create, capsys):
        controller = Mock()
        controller.handle.return_value = LifecycleResult("abc", {"IndexName": "products-abc"})
        mock_create.return_value = controller

        assert main(["create", "--prefix", "products"]) == 0

        event = controller.handle.call_args.args[0]
        assert event == {"RequestType": "Create", "ResourceProperties": {"IndexNamePrefix": "products"}}
        assert json.loads(capsys.readouterr().out) == {
            "PhysicalResourceId": "abc",
            "Data": {"IndexName": "products-abc"},
        }

    @patch("esindex.handlers.factory.create_controller")
    def test_delete_failure_exits_nonzero(self, mock_create):
        controller = Mock()
        controller.handle.side_effect = IndexDeleteError("Error when deleting the older index.", "products-abc", 404)
        mock_create.return_value = controller

        assert main(["delete", "--physical-id", "abc"]) == 1
        assert controller.handle.call_args.args[0]["PhysicalResourceId"] == "abc"

    @patch("esindex.handlers.factory.create_poller")
    def test_status(self, mock_create, capsys):
        poller = Mock()
        poller.is_complete.return_value = False
        mock_create.return_value = poller

        assert main(["status", "--task-id", "node-1:42"]) == 0

        poller.is_complete.assert_called_once_with({"RequestType": "Update"}, {"TaskId": "node-1:42"})
        assert json.loads(capsys.readouterr().out) == {"IsComplete": False}
