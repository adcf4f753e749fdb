from __future__ import annotations

import io
import json
from pathlib import Path

import httpx

from api_typegen.cli import create_generator

SAMPLE = {"id": 7, "name": "Ada", "roles": [{"code": "admin"}]}


def _transport(payload: object, seen: list[httpx.Request] | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(200, json=payload)

    return httpx.MockTransport(handler)


def _responses(out: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in out.getvalue().splitlines()]


def test_fetch_writes_types_and_api_then_logs_sanitized_event(tmp_path: Path) -> None:
    out = io.StringIO()
    generator = create_generator(
        str(tmp_path),
        out_stream=out,
        transport=_transport(SAMPLE),
        home_dir=tmp_path / "home",
    )

    exit_code = generator.run_fetch(
        url="https://example.com/api/user",
        type_name="userResponse",
        api_name="getUser",
        token="secret-token",
    )

    assert exit_code == 0
    response = _responses(out)[-1]
    assert response["ok"] is True
    assert response["result"]["final_type_name"] == "UserResponse"

    types_text = (tmp_path / "getUser" / "types.ts").read_text(encoding="utf-8")
    assert types_text.startswith("export interface UserResponse {\n    id: number;")
    assert "    roles: Role[];" in types_text
    assert "export interface Role {\n    code: string;\n}" in types_text
    api_text = (tmp_path / "getUser" / "api.ts").read_text(encoding="utf-8")
    assert '  return request.get<UserResponse>("https://example.com/api/user");' in api_text

    events = generator.log.read()
    assert len(events) == 1
    assert events[0]["command"] == "fetch"
    assert events[0]["metadata"]["token_present"] is True
    assert "secret-token" not in generator.log.path.read_text(encoding="utf-8")


def test_repeated_fetch_merges_incrementally(tmp_path: Path) -> None:
    out = io.StringIO()
    generator = create_generator(
        str(tmp_path),
        out_stream=out,
        transport=_transport(SAMPLE),
        home_dir=tmp_path / "home",
    )

    generator.run_fetch(url="https://example.com/u", type_name="User", api_name="getUser")
    generator.run_fetch(url="https://example.com/u", type_name="User", api_name="getUser")

    second = _responses(out)[-1]["result"]
    assert second["final_type_name"] == "User1"
    assert second["type_conflict"] is True
    assert second["api_duplicate"] is True
    assert second["renamed_types"] == ["User1", "Role1"]
    types_text = (tmp_path / "getUser" / "types.ts").read_text(encoding="utf-8")
    assert "    roles: Role1[];" in types_text
    api_text = (tmp_path / "getUser" / "api.ts").read_text(encoding="utf-8")
    assert api_text.count("export function getUser(") == 1


def test_fetch_with_body_generates_request_type(tmp_path: Path) -> None:
    out = io.StringIO()
    seen: list[httpx.Request] = []
    generator = create_generator(
        str(tmp_path),
        out_stream=out,
        transport=_transport({"id": 1}, seen),
        home_dir=tmp_path / "home",
    )

    exit_code = generator.run_fetch(
        url="https://example.com/api/user",
        type_name="User",
        api_name="createUser",
        method="post",
        body='{"name": "Ada"}',
    )

    assert exit_code == 0
    assert seen[0].method == "POST"
    types_text = (tmp_path / "createUser" / "types.ts").read_text(encoding="utf-8")
    assert "export interface UserRequest {\n    name: string;\n}" in types_text
    api_text = (tmp_path / "createUser" / "api.ts").read_text(encoding="utf-8")
    assert "export function createUser(data: UserRequest) {" in api_text


def test_invalid_body_and_fetch_failures_write_nothing(tmp_path: Path) -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    out = io.StringIO()
    generator = create_generator(
        str(tmp_path),
        out_stream=out,
        transport=httpx.MockTransport(failing),
        home_dir=tmp_path / "home",
    )

    assert generator.run_fetch(url="https://x", type_name="A", api_name="a", body="{") == 1
    assert generator.run_fetch(url="https://x", type_name="A", api_name="a") == 1

    codes = [response["error"]["code"] for response in _responses(out)]
    assert codes == ["INVALID_BODY", "FETCH_FAILED"]
    assert not (tmp_path / "a").exists()
    assert [event["error_code"] for event in generator.log.read()] == codes


def test_request_body_with_differently_shaped_nested_key_gets_own_type(tmp_path: Path) -> None:
    out = io.StringIO()
    generator = create_generator(
        str(tmp_path),
        out_stream=out,
        transport=_transport({"user": {"name": "a"}}),
        home_dir=tmp_path / "home",
    )

    exit_code = generator.run_fetch(
        url="https://example.com/api/result",
        type_name="Result",
        api_name="createResult",
        method="POST",
        body='{"user": {"id": 1}}',
    )

    assert exit_code == 0
    types_text = (tmp_path / "createResult" / "types.ts").read_text(encoding="utf-8")
    assert "export interface Result {\n    user: User;\n}" in types_text
    assert "export interface User {\n    name: string;\n}" in types_text
    assert "export interface ResultRequest {\n    user: User1;\n}" in types_text
    assert "export interface User1 {\n    id: number;\n}" in types_text
    api_text = (tmp_path / "createResult" / "api.ts").read_text(encoding="utf-8")
    assert "export function createResult(data: ResultRequest) {" in api_text
