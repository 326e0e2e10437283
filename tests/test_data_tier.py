"""End-to-end tests for generating and writing a data tier."""

import pytest

from dtgen.codegen import generate_data_tier, write_data_tier
from dtgen.codegen.core.config import GeneratorConfig, OutputMode
from dtgen.codegen.core.generator import GeneratorError
from dtgen.codegen.core.sink import SHARED_SQL_FILE, ArtifactKind
from dtgen.codegen.sql import PERMISSIONS_FILE, SEPARATOR


def test_artifact_order(database, config):
    result = generate_data_tier(database, config)

    assert result.success
    kinds = [artifact.kind for artifact in result.artifacts]
    first_host = kinds.index(ArtifactKind.TRANSFER)
    assert all(kind == ArtifactKind.SQL for kind in kinds[:first_host])
    assert ArtifactKind.SQL not in kinds[first_host:]
    assert kinds[-1] == ArtifactKind.MANIFEST

    paths = [artifact.path for artifact in result.artifacts]
    assert paths[:5] == [
        "InsertCustomer.sql",
        "UpdateCustomer.sql",
        "DeleteCustomer.sql",
        "SelectCustomer.sql",
        "SelectAllCustomer.sql",
    ]
    assert paths[first_host:first_host + 2] == ["Customer.cs", "Repositories/CustomerData.cs"]


def test_metadata(database, config):
    result = generate_data_tier(database, config)

    assert result.metadata["language"] == "csharp"
    assert result.metadata["database"] == "Shop"
    assert result.metadata["table_count"] == 2
    # Customer 5 + OrderLine 9
    assert result.metadata["procedure_count"] == 14


def test_database_name_override(database):
    result = generate_data_tier(database, GeneratorConfig(database_name="ShopTest"))

    assert result.artifacts[0].content.startswith("use [ShopTest]\ngo\n\n")


def test_sql_only_and_code_only(database, config):
    sql_only = generate_data_tier(database, config, sql_only=True)
    code_only = generate_data_tier(database, config, code_only=True)

    assert {a.kind for a in sql_only.artifacts} == {ArtifactKind.SQL}
    assert ArtifactKind.SQL not in {a.kind for a in code_only.artifacts}


def test_conflicting_scopes_fail(database, config):
    result = generate_data_tier(database, config, sql_only=True, code_only=True)

    assert not result.success
    assert isinstance(result.exception, GeneratorError)


def test_unknown_language_fails(database):
    result = generate_data_tier(database, GeneratorConfig(language="cobol"))

    assert not result.success
    assert "cobol" in result.error_message


def test_table_without_primary_key_warns(config):
    from dtgen.codegen.core.schema import Column, Database, build_table

    table = build_table("Log", [Column("Message", "nvarchar", length=100)])
    result = generate_data_tier(Database("Shop", (table,)), config)

    assert result.success
    assert any("no primary key" in warning for warning in result.warnings)


def test_write_multi_file(tmp_path, database, config):
    result = generate_data_tier(database, config)
    written = write_data_tier(result, config, tmp_path)

    assert len(written) == len(result.artifacts)
    assert (tmp_path / "SelectAllOrderLineByProductID.sql").exists()
    assert (tmp_path / "Repositories" / "OrderLineData.cs").exists()
    assert (tmp_path / "DataTier.csproj").exists()


def test_write_single_file_with_grant(tmp_path, database):
    config = GeneratorConfig(
        output_mode=OutputMode.SINGLE_FILE,
        grant_principal="WebUser",
        output_path=str(tmp_path),
    )
    write_data_tier(generate_data_tier(database, config), config)

    sql_files = sorted(p.name for p in tmp_path.glob("*.sql"))
    assert sql_files == [SHARED_SQL_FILE]
    assert not (tmp_path / PERMISSIONS_FILE).exists()

    script = (tmp_path / SHARED_SQL_FILE).read_text()
    assert script.startswith("use [Shop]\ngo\n\n" + SEPARATOR + "use [master]\n")
    assert script.count("create procedure") == 14
    assert script.count("grant execute on") == 14
    assert script.index("[CustomerInsert]") < script.index("[OrderLineInsert]")


def test_rerun_is_byte_identical(tmp_path, database):
    config = GeneratorConfig(language="python")
    first, second = tmp_path / "first", tmp_path / "second"
    write_data_tier(generate_data_tier(database, config), config, first)
    write_data_tier(generate_data_tier(database, config), config, second)

    for path in first.rglob("*"):
        if path.is_file():
            assert path.read_bytes() == (second / path.relative_to(first)).read_bytes()


def test_write_refuses_failed_result(tmp_path, database):
    failed = generate_data_tier(database, GeneratorConfig(language="cobol"))
    with pytest.raises(GeneratorError):
        write_data_tier(failed, output_path=tmp_path)


def test_result_lookup_helpers(database, config):
    result = generate_data_tier(database, config)

    (manifest,) = result.artifacts_of(ArtifactKind.MANIFEST)
    assert result.get("DataTier.csproj") is manifest
    assert result.get("Missing.cs") is None
