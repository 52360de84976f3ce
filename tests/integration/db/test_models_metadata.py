from __future__ import annotations

from dealboard.models import Base


def test_model_metadata_contains_board_tables():
    expected = {
        "pipeline_stages",
        "deals",
        "deal_products",
        "deal_tags",
        "deal_activities",
        "integration_settings",
    }
    assert expected == set(Base.metadata.tables.keys())


def test_child_tables_cascade_with_their_deal():
    for table_name in ("deal_products", "deal_tags", "deal_activities"):
        (foreign_key,) = Base.metadata.tables[table_name].foreign_keys
        assert foreign_key.column.table.name == "deals"
        assert foreign_key.ondelete == "CASCADE"


def test_stage_delete_is_restricted_while_deals_reference_it():
    (foreign_key,) = Base.metadata.tables["deals"].foreign_keys
    assert foreign_key.column.table.name == "pipeline_stages"
    assert foreign_key.ondelete == "RESTRICT"
