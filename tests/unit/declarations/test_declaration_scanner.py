from __future__ import annotations

from api_typegen.declarations import extract_declarations, scan_declared_names

SOURCE = """import type { Shared } from "./shared";

export interface ApiResponse {
    data: Data;
    meta: {
        page: number;
        nested: {
            deep: boolean;
        };
    };
}

export type UserId = number;

export interface Data {
    id: UserId;
}
"""


def test_scan_declared_names_in_source_order() -> None:
    assert scan_declared_names(SOURCE) == ["ApiResponse", "UserId", "Data"]


def test_extract_declarations_tracks_nested_braces() -> None:
    declarations = extract_declarations(SOURCE)

    assert [item.name for item in declarations] == ["ApiResponse", "UserId", "Data"]
    assert [item.kind for item in declarations] == ["interface", "type-alias", "interface"]

    api_response = declarations[0].body_text
    assert api_response.startswith("export interface ApiResponse {")
    assert api_response.endswith("\n}")
    assert "deep: boolean;" in api_response
    assert "export type UserId" not in api_response

    assert declarations[1].body_text == "export type UserId = number;"
    assert declarations[2].body_text == "export interface Data {\n    id: UserId;\n}"


def test_surrounding_text_is_not_part_of_any_declaration() -> None:
    declarations = extract_declarations(SOURCE)

    assert all("import type" not in item.body_text for item in declarations)


def test_balanced_single_line_interface_closes_on_start_line() -> None:
    text = "export interface User { id: number; }\nexport interface Post { id: number; }"

    declarations = extract_declarations(text)

    assert [item.body_text for item in declarations] == [
        "export interface User { id: number; }",
        "export interface Post { id: number; }",
    ]


def test_multi_line_union_alias_accumulates_until_semicolon() -> None:
    text = 'export type Status =\n    | "active"\n    | "disabled";\n\nexport interface A {\n}\n'

    declarations = extract_declarations(text)

    assert [item.name for item in declarations] == ["Status", "A"]
    assert declarations[0].body_text == 'export type Status =\n    | "active"\n    | "disabled";'


def test_object_type_alias_is_tracked_like_an_interface() -> None:
    text = "export type Point = {\n    x: number;\n    y: number;\n};\n"

    declarations = extract_declarations(text)

    assert len(declarations) == 1
    assert declarations[0].kind == "type-alias"
    assert declarations[0].body_text == "export type Point = {\n    x: number;\n    y: number;\n};"


def test_unterminated_declaration_is_dropped_without_error() -> None:
    text = "export interface Broken {\n    a: string;\n"

    assert extract_declarations(text) == []
    assert scan_declared_names(text) == ["Broken"]


def test_text_without_declarations_yields_nothing() -> None:
    assert extract_declarations("const a = 1;\nconst b = 2;") == []
    assert scan_declared_names("") == []
