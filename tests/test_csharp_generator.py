"""Tests for the C# transfer, access and project generation."""

import re

import pytest

from dtgen.codegen.core.config import GeneratorConfig
from dtgen.codegen.core.procedures import decide_procedures
from dtgen.codegen.core.schema import Column, build_table
from dtgen.codegen.core.sink import ArtifactKind
from dtgen.codegen.languages.csharp import CSharpGenerator, create_generator
from dtgen.codegen.languages.csharp.config import (
    parameter_value,
    reader_expression,
    scalar_conversion,
)


@pytest.fixture
def generator(config):
    return CSharpGenerator(config)


def _access(generator, table):
    return generator.generate_access(
        table, decide_procedures(table, generator.config.procedure_prefix)
    )


def _transfer(generator, table):
    return generator.generate_transfer(
        table, decide_procedures(table, generator.config.procedure_prefix)
    )


def test_artifact_paths(generator, customer_table):
    transfer, access = generator.generate_table(customer_table)

    assert transfer.kind == ArtifactKind.TRANSFER
    assert transfer.path == "Customer.cs"
    assert access.kind == ArtifactKind.ACCESS
    assert access.path == "Repositories/CustomerData.cs"


def test_suffixes_apply_to_class_names(customer_table):
    generator = create_generator(transfer_suffix="Dto", access_suffix="Repository")
    transfer, access = generator.generate_table(customer_table)

    assert transfer.path == "CustomerDto.cs"
    assert access.path == "Repositories/CustomerRepository.cs"
    assert "public class CustomerRepository\n" in access.content
    assert "public void Insert(CustomerDto customer)" in access.content


def test_transfer_constructors(generator, customer_table):
    code = _transfer(generator, customer_table)

    assert "namespace DataTier\n" in code
    assert "\t\tpublic Customer()\n" in code
    assert "\t\tpublic Customer(string name, string email)\n" in code
    assert "\t\tpublic Customer(int id, string name, string email)\n" in code
    assert "\t\t\tthis.Id = id;\n" in code
    assert "\t\tpublic int Id { get; set; }\n" in code
    assert "\t\tpublic string Email { get; set; }\n" in code


def test_partial_constructor_omitted_without_generated_columns(generator):
    table = build_table(
        "Setting",
        [Column("Key", "varchar", length=20), Column("Value", "varchar", length=200)],
        primary_keys=["Key"],
    )
    code = _transfer(generator, table)

    assert code.count("public Setting(") == 2
    assert "public Setting(string key, string value)" in code


def test_insert_binds_parameters_and_assigns_identity(generator, customer_table):
    code = _access(generator, customer_table)

    assert "namespace DataTier.Repositories\n" in code
    assert (
        "\t\t\t\tnew SqlParameter(\"@Name\", customer.Name),\n"
        "\t\t\t\tnew SqlParameter(\"@Email\", customer.Email)\n"
    ) in code
    assert (
        "customer.Id = Convert.ToInt32(SqlClientUtility.ExecuteScalar("
        "connectionStringName, CommandType.StoredProcedure, \"CustomerInsert\", parameters));"
    ) in code


def test_nullable_reference_columns_bind_dbnull(generator):
    table = build_table(
        "Contact",
        [
            Column("Id", "int", is_identity=True),
            Column("Email", "nvarchar", length=100, nullable=True),
            Column("Photo", "varbinary", length=-1, nullable=True),
            Column("Age", "int", nullable=True),
            Column("Name", "nvarchar", length=50),
        ],
        primary_keys=["Id"],
    )
    code = _access(generator, table)

    assert (
        'new SqlParameter("@Email", (object) contact.Email ?? DBNull.Value)' in code
    )
    assert (
        'new SqlParameter("@Photo", (object) contact.Photo ?? DBNull.Value)' in code
    )
    assert 'new SqlParameter("@Age", contact.Age)' in code
    assert 'new SqlParameter("@Name", contact.Name)' in code
    assert parameter_value(Column("Note", "text", nullable=True), "note") == (
        "(object) note ?? DBNull.Value"
    )


def test_method_signatures(generator, customer_table):
    code = _access(generator, customer_table)

    assert "public void Update(Customer customer)" in code
    assert "public void Delete(int id)" in code
    assert "public Customer Select(int id)" in code
    assert "public string SelectJson(int id)" in code
    assert "public List<Customer> SelectAll()" in code
    assert "public string SelectAllJson()" in code


def test_json_variant_calls_base_procedure(generator, customer_table):
    code = _access(generator, customer_table)

    assert (
        "return SqlClientUtility.ExecuteJson(connectionStringName, "
        "CommandType.StoredProcedure, \"CustomerSelectAll\");"
    ) in code
    assert (
        "return SqlClientUtility.ExecuteJson(connectionStringName, "
        "CommandType.StoredProcedure, \"CustomerSelect\", parameters);"
    ) in code


def test_foreign_key_methods(generator, order_line_table):
    code = _access(generator, order_line_table)

    assert "public void DeleteAllByOrderID(int orderID)" in code
    assert "public List<OrderLine> SelectAllByProductID(int productID)" in code
    assert "public string SelectAllByProductIDJson(int productID)" in code
    assert 'new SqlParameter("@ProductID", productID)' in code
    assert '"OrderLineSelectAllByOrderID", parameters)' in code


def test_prefix_used_in_every_call(customer_table):
    generator = CSharpGenerator(GeneratorConfig(procedure_prefix="usp_"))
    code = _access(generator, customer_table)

    names = re.findall(r'CommandType\.StoredProcedure, "(\w+)"', code)
    assert names
    assert all(name.startswith("usp_Customer") for name in names)


def test_map_data_reader_reads_in_column_order(generator, order_line_table):
    code = _access(generator, order_line_table)

    assert "private OrderLine MapDataReader(SqlDataReader dataReader)" in code
    assert (
        "\t\t\torderLine.OrderLineID = dataReader.IsDBNull(0) ? 0 : dataReader.GetInt32(0);\n"
        "\t\t\torderLine.OrderID = dataReader.IsDBNull(1) ? 0 : dataReader.GetInt32(1);\n"
        "\t\t\torderLine.ProductID = dataReader.IsDBNull(2) ? 0 : dataReader.GetInt32(2);\n"
        "\t\t\torderLine.Quantity = dataReader.IsDBNull(3) ? (short) 0 : dataReader.GetInt16(3);\n"
        "\t\t\torderLine.UnitPrice = dataReader.IsDBNull(4) ? 0m : dataReader.GetDecimal(4);\n"
    ) in code


def test_argument_order_matches_sql_parameters(generator, order_line_table):
    code = _access(generator, order_line_table)
    insert = decide_procedures(order_line_table)[0]

    bound = re.findall(r'new SqlParameter\("@(\w+)", orderLine\.', code)
    # Insert binds first, Update binds every column next
    assert bound[: len(insert.parameters)] == [c.name for c in insert.parameters]
    assert bound[len(insert.parameters):] == [c.name for c in order_line_table.columns]


def test_rowguid_insert_casts_scalar(generator, document_table):
    code = _access(generator, document_table)

    assert "document.DocumentGuid = (Guid) SqlClientUtility.ExecuteScalar(" in code


def test_reserved_words_are_escaped(generator):
    table = build_table(
        "Event",
        [Column("Id", "int", is_identity=True), Column("Class", "nvarchar", length=10)],
        primary_keys=["Id"],
    )
    transfer = _transfer(generator, table)
    access = _access(generator, table)

    assert "public Event(string @class)" in transfer
    assert "this.Class = @class;" in transfer
    assert "public void Insert(Event @event)" in access


def test_reader_and_scalar_helpers():
    assert reader_expression(Column("Blob", "varbinary", length=-1), 2) == (
        "dataReader.IsDBNull(2) ? null : (byte[]) dataReader.GetValue(2)"
    )
    assert scalar_conversion(Column("Id", "bigint"), "x") == "Convert.ToInt64(x)"


def test_project_manifest(generator, database):
    (manifest,) = generator.generate_manifest(database)

    assert manifest.kind == ArtifactKind.MANIFEST
    assert manifest.path == "DataTier.csproj"
    assert "<RootNamespace>DataTier</RootNamespace>" in manifest.content
    assert '<HintPath>Lib\\SharpCore\\SharpCore.Data.dll</HintPath>' in manifest.content

    includes = re.findall(r'<Compile Include="([^"]+)" />', manifest.content)
    assert includes == [
        "Customer.cs",
        "Repositories\\CustomerData.cs",
        "OrderLine.cs",
        "Repositories\\OrderLineData.cs",
    ]


def test_generation_is_deterministic(database):
    first = CSharpGenerator(GeneratorConfig()).generate(database)
    second = CSharpGenerator(GeneratorConfig()).generate(database)
    assert first == second
