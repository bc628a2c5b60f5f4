"""Tests for the command-line parser script."""

import json

from conftest import CORFO_RESPONSE, CORFO_TEXT, StubGateway
from scripts.parse_file import main


class TestParseFileScript:
    def test_prints_outcome_and_validations(self, tmp_path, capsys):
        path = tmp_path / "bases.txt"
        path.write_text(CORFO_TEXT, encoding="utf-8")
        gateway = StubGateway([CORFO_RESPONSE, {"data_quality": 0.9}])

        exit_code = main([str(path)], gateway=gateway)

        assert exit_code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["outcome"]["success"] is True
        assert output["validations"][0]["isValid"] is True
        assert gateway.call_count == 2

    def test_local_validation_only(self, tmp_path, capsys):
        path = tmp_path / "bases.txt"
        path.write_text(CORFO_TEXT, encoding="utf-8")
        gateway = StubGateway(CORFO_RESPONSE)

        assert main([str(path), "--no-ai-validation"], gateway=gateway) == 0
        assert gateway.call_count == 1

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "no_existe.txt")], gateway=StubGateway(CORFO_RESPONSE)) == 2

    def test_failed_parse_exit_code(self, tmp_path, capsys, failing_gateway):
        path = tmp_path / "bases.txt"
        path.write_text(CORFO_TEXT, encoding="utf-8")
        assert main([str(path)], gateway=failing_gateway) == 1
