from __future__ import annotations

from api_typegen.declarations import scan_declared_names
from api_typegen.merge import merge_types_content

EXISTING = "export interface Data {\n  value: string;\n}\n"
NEW_BLOB = """export interface Data {
  user: User;
}

export interface User {
  name: string;
}
"""


def test_conflict_cascades_suffix_to_every_declaration_in_blob() -> None:
    result = merge_types_content(EXISTING, NEW_BLOB, "Data")

    assert result.is_duplicate is False
    assert result.has_conflict is True
    assert result.suffix == 1
    assert result.final_type_name == "Data1"
    assert result.renamed_types == ("Data1", "User1")
    assert result.merged == (
        "export interface Data {\n  value: string;\n}"
        "\n\n"
        "export interface Data1 {\n  user: User1;\n}"
        "\n\n"
        "export interface User1 {\n  name: string;\n}"
    )


def test_identical_content_is_reported_as_duplicate() -> None:
    result = merge_types_content(EXISTING, EXISTING, "Value")

    assert result.is_duplicate is True
    assert result.merged == EXISTING
    assert result.renamed_types == ()


def test_same_name_with_different_body_is_dropped() -> None:
    existing = (
        "export interface Data {\n  value: string;\n}\n\n"
        "export interface Shared {\n  a: number;\n}"
    )
    new_blob = (
        "export interface Order {\n  shared: Shared;\n}\n\n"
        "export interface Shared {\n  b: string;\n}"
    )

    result = merge_types_content(existing, new_blob, "Order")

    assert result.has_conflict is False
    assert result.final_type_name == "Order"
    assert result.merged.count("export interface Shared") == 1
    assert "b: string;" not in result.merged
    assert result.merged.endswith("export interface Order {\n  shared: Shared;\n}")


def test_no_conflict_appends_only_new_declarations() -> None:
    new_blob = "export interface Product {\n  sku: string;\n}\n"

    result = merge_types_content(EXISTING, new_blob, "Product")

    assert result.is_duplicate is False
    assert result.has_conflict is False
    assert result.renamed_types == ()
    assert result.merged == EXISTING.strip() + "\n\n" + new_blob.strip()


def test_suffix_skips_names_taken_by_earlier_merges() -> None:
    first = merge_types_content(EXISTING, NEW_BLOB, "Data")
    second = merge_types_content(first.merged, NEW_BLOB, "Data")

    assert second.final_type_name == "Data2"
    assert "export interface Data2 {\n  user: User2;\n}" in second.merged
    assert "export interface User2 {\n  name: string;\n}" in second.merged


def test_names_stay_unique_across_repeated_merges() -> None:
    merged = ""
    for _ in range(4):
        merged = merge_types_content(merged, NEW_BLOB, "Data").merged

    names = scan_declared_names(merged)
    assert len(names) == len(set(names))
    assert names == ["Data", "User", "Data1", "User1", "Data2", "User2", "Data3", "User3"]


def test_missing_existing_content_is_treated_as_empty() -> None:
    for existing in (None, "", "   \n"):
        result = merge_types_content(existing, NEW_BLOB, "Data")

        assert result.is_duplicate is False
        assert result.has_conflict is False
        assert result.final_type_name == "Data"
        assert result.merged == NEW_BLOB.strip()


def test_duplicate_names_inside_one_blob_are_collapsed() -> None:
    blob = (
        "export interface Response {\n  data: Data;\n}\n\n"
        "export interface Data {\n  id: number;\n}\n\n"
        "export interface ResponseRequest {\n  data: Data;\n}\n\n"
        "export interface Data {\n  name: string;\n}\n"
    )

    result = merge_types_content(None, blob, "Response")

    assert scan_declared_names(result.merged) == ["Response", "Data", "ResponseRequest"]
    assert "name: string;" not in result.merged


def test_unrecognized_text_passes_through_into_empty_file() -> None:
    result = merge_types_content(None, "// nothing generated\n", "Data")

    assert result.merged == "// nothing generated\n"
    assert result.is_duplicate is False
