"""Tests for the operation decision engine."""

from dtgen.codegen.core.procedures import (
    Operation,
    decide_procedures,
    operation_set,
)
from dtgen.codegen.core.schema import Column, build_table


def _names(columns):
    return [column.name for column in columns]


def _by_method(procedures):
    return {procedure.method_name: procedure for procedure in procedures}


def test_customer_operations(customer_table):
    assert operation_set(customer_table) == [
        "Insert",
        "Update",
        "Delete",
        "Select",
        "SelectJson",
        "SelectAll",
        "SelectAllJson",
    ]


def test_customer_insert_skips_identity_and_returns_it(customer_table):
    insert = _by_method(decide_procedures(customer_table))["Insert"]

    assert _names(insert.parameters) == ["Name", "Email"]
    assert _names(insert.insert_columns) == ["Name", "Email"]
    assert insert.return_column is customer_table.get_column("Id")


def test_customer_keyed_operations_take_primary_key(customer_table):
    procedures = _by_method(decide_procedures(customer_table))

    assert _names(procedures["Delete"].parameters) == ["Id"]
    assert _names(procedures["Select"].parameters) == ["Id"]

    update = procedures["Update"]
    assert _names(update.set_columns) == ["Name", "Email"]
    assert _names(update.key_columns) == ["Id"]
    assert _names(update.parameters) == ["Id", "Name", "Email"]


def test_two_foreign_key_groups_emission_order(order_line_table):
    assert operation_set(order_line_table) == [
        "Insert",
        "Update",
        "Delete",
        "DeleteAllByOrderID",
        "DeleteAllByProductID",
        "Select",
        "SelectJson",
        "SelectAll",
        "SelectAllJson",
        "SelectAllByOrderID",
        "SelectAllByProductID",
        "SelectAllByOrderIDJson",
        "SelectAllByProductIDJson",
    ]


def test_group_operations_are_keyed_by_their_columns(order_line_table):
    procedures = _by_method(decide_procedures(order_line_table))

    delete_all = procedures["DeleteAllByProductID"]
    assert delete_all.name == "OrderLineDeleteAllByProductID"
    assert _names(delete_all.parameters) == ["ProductID"]
    assert _names(delete_all.key_columns) == ["ProductID"]

    select_all = procedures["SelectAllByOrderID"]
    assert _names(select_all.projection) == _names(order_line_table.columns)


def test_all_key_link_table(link_table):
    # cols == PKs == FK groups: no Update, no Select, no SelectAll
    assert operation_set(link_table) == [
        "Insert",
        "Delete",
        "DeleteAllByCustomerID",
        "DeleteAllByTagID",
        "SelectAllByCustomerID",
        "SelectAllByTagID",
        "SelectAllByCustomerIDJson",
        "SelectAllByTagIDJson",
    ]


def test_table_without_primary_key():
    table = build_table("Log", [Column("Message", "nvarchar", length=200)])
    assert operation_set(table) == ["Insert", "SelectAll", "SelectAllJson"]


def test_foreign_key_comparison_counts_groups_not_columns():
    # Three columns, one composite group of two: groups (1) != columns (3)
    columns = [
        Column("OrderID", "int"),
        Column("LineNo", "int"),
        Column("Note", "nvarchar", length=20),
    ]
    table = build_table(
        "OrderNote",
        columns,
        primary_keys=["OrderID", "LineNo"],
        foreign_keys={"FK_OrderNote_OrderLine": ["OrderID", "LineNo"]},
    )
    names = operation_set(table)

    assert "Update" in names
    assert "Select" in names
    assert "DeleteAllByOrderID_LineNo" in names
    assert "SelectAllByOrderID_LineNo" in names


def test_composite_group_parameters_in_group_order():
    columns = [Column("A", "int"), Column("B", "int"), Column("C", "int")]
    table = build_table("T", columns, foreign_keys={"FK": ["C", "A"]})
    delete_all = _by_method(decide_procedures(table))["DeleteAllByC_A"]
    assert _names(delete_all.parameters) == ["C", "A"]


def test_rowguid_is_returned_when_no_identity(document_table):
    insert = decide_procedures(document_table)[0]

    assert insert.operation is Operation.INSERT
    assert _names(insert.parameters) == ["Title", "Size"]
    assert _names(insert.insert_columns) == ["DocumentGuid", "Title", "Size"]
    assert insert.return_column.name == "DocumentGuid"
    assert insert.rowguid_column.name == "DocumentGuid"


def test_identity_wins_over_rowguid():
    columns = [
        Column("Id", "int", is_identity=True),
        Column("RowGuid", "uniqueidentifier", is_rowguid=True),
        Column("Name", "nvarchar", length=10),
    ]
    table = build_table("Both", columns, primary_keys=["Id"])
    insert = decide_procedures(table)[0]

    assert insert.return_column.name == "Id"
    assert _names(insert.parameters) == ["Name"]


def test_prefix_applies_to_procedure_names_only(customer_table):
    procedures = decide_procedures(customer_table, prefix="usp_")

    assert [p.name for p in procedures][:2] == ["usp_CustomerInsert", "usp_CustomerUpdate"]
    assert procedures[0].method_name == "Insert"


def test_json_variants_share_base_procedure(customer_table):
    procedures = _by_method(decide_procedures(customer_table))

    assert procedures["SelectJson"].name == procedures["Select"].name
    assert procedures["SelectAllJson"].name == procedures["SelectAll"].name
    assert not procedures["SelectJson"].emits_sql
    assert procedures["Select"].emits_sql


def test_sql_file_names(order_line_table):
    procedures = _by_method(decide_procedures(order_line_table, prefix="usp_"))

    assert procedures["Insert"].sql_file_name == "InsertOrderLine.sql"
    assert procedures["DeleteAllByOrderID"].sql_file_name == (
        "DeleteAllOrderLineByOrderID.sql"
    )
    assert procedures["SelectAllByProductID"].sql_file_name == (
        "SelectAllOrderLineByProductID.sql"
    )


def test_decision_is_pure(order_line_table):
    assert decide_procedures(order_line_table) == decide_procedures(order_line_table)
