from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from api_typegen.cli import build_arg_parser, main


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def _run(argv: list[str]) -> tuple[int, list[dict[str, object]]]:
    out = io.StringIO()
    exit_code = main(argv, out_stream=out)
    return exit_code, [json.loads(line) for line in out.getvalue().splitlines()]


def test_init_then_config_reports_effective_values(tmp_path: Path) -> None:
    exit_code, responses = _run(["init", "--project-root", str(tmp_path)])
    assert exit_code == 0
    assert responses[0]["result"]["path"] == str((tmp_path / "api_typegen.toml").resolve())

    exit_code, responses = _run(
        ["config", "--project-root", str(tmp_path), "--type-prefix", "I", "--max-retries", "5"]
    )
    assert exit_code == 0
    result = responses[0]["result"]
    assert result["type_prefix"] == "I"
    assert result["request_module"] == "@/utils/request"
    assert result["network"] == {"timeout_seconds": 10.0, "max_retries": 5}
    assert result["output_dir"] == str(tmp_path.resolve())


def test_init_refuses_existing_config(tmp_path: Path) -> None:
    _run(["init", "--project-root", str(tmp_path)])

    exit_code, responses = _run(["init", "--project-root", str(tmp_path)])

    assert exit_code == 1
    assert responses[0]["error"]["code"] == "CONFIG_EXISTS"


def test_invalid_config_is_reported_not_raised(tmp_path: Path) -> None:
    (tmp_path / "api_typegen.toml").write_text("[network]\nmax_retries = 0\n", encoding="utf-8")

    exit_code, responses = _run(["config", "--project-root", str(tmp_path)])

    assert exit_code == 1
    assert responses[0]["error"]["code"] == "INVALID_CONFIG"
    assert "network.max_retries" in responses[0]["error"]["message"]


def test_blocked_output_dir_returns_blocked_envelope(tmp_path: Path) -> None:
    source = tmp_path / "openapi.json"
    source.write_text(
        json.dumps(
            {
                "paths": {
                    "/ping": {
                        "get": {
                            "responses": {
                                "200": {
                                    "content": {
                                        "application/json": {"schema": {"type": "string"}}
                                    }
                                }
                            }
                        }
                    }
                }
            }
        ),
        encoding="utf-8",
    )

    exit_code, responses = _run(
        ["openapi", str(source), "--project-root", str(tmp_path), "--output-dir", "/etc"]
    )

    assert exit_code == 1
    blocked = responses[0]
    assert blocked["blocked"] is True
    assert blocked["error"]["code"] == "PATH_BLOCKED"
    assert blocked["result"]["hint"]
    assert responses[-1]["result"]["failed"] == 1

    log_lines = (tmp_path / ".api_typegen" / "generation.jsonl").read_text(encoding="utf-8")
    event = json.loads(log_lines.splitlines()[0])
    assert event["blocked"] is True
    assert event["error_code"] == "PATH_BLOCKED"


def test_fetch_requires_url_and_rejects_token_with_cookie() -> None:
    parser = build_arg_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["fetch"])
    with pytest.raises(SystemExit):
        parser.parse_args(["fetch", "--url", "https://x", "--token", "a", "--cookie", "b"])

    args = parser.parse_args(["fetch", "--url", "https://x", "--method", "post"])
    assert args.method == "POST"
    assert args.type_name == "ApiResponse"
    assert args.api_name == "getData"
