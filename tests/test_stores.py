import json

import pytest

from contractgen.errors import BlockNotFound, PlaceholderConflict
from contractgen.models import DynamicBlock, MappingType, OutputType, PlaceholderMapping
from contractgen.stores import BlockStore, MappingRegistry


def test_block_store_get_and_list(fte_block):
    store = BlockStore([fte_block])
    assert store.get("b-fte") is fte_block
    assert store.list() == [fte_block]
    assert "b-fte" in store
    assert len(store) == 1


def test_block_store_missing_block():
    with pytest.raises(BlockNotFound):
        BlockStore().get("nope")
    with pytest.raises(BlockNotFound):
        BlockStore().remove("nope")


def test_placeholder_collision_is_rejected(fte_block):
    store = BlockStore([fte_block])
    other = DynamicBlock(id="b-other", placeholder="FTEBreakdown")
    with pytest.raises(PlaceholderConflict) as exc:
        store.add(other)
    assert exc.value.existing_id == "b-fte"
    assert "FTEBreakdown" in str(exc.value)


def test_replacing_same_block_keeps_placeholder(fte_block):
    store = BlockStore([fte_block])
    updated = DynamicBlock(id="b-fte", placeholder="FTEBreakdown", output_type="table")
    store.add(updated)
    assert store.get("b-fte").output_type == "table"
    assert store.find_by_placeholder("FTEBreakdown") is updated


def test_block_from_persisted_dict():
    block = DynamicBlock.from_dict({
        "id": "b1",
        "name": "FTE",
        "placeholder": "{{FTEBlock}}",
        "outputType": "table-no-borders",
        "format": "• {{label}}: {{value}}",
        "conditions": json.dumps([{"field": "clinicalFTE", "operator": ">", "value": 0, "label": "Clinical"}]),
        "alwaysInclude": [{"label": "Total", "valueField": "totalFTE"}],
    })
    assert block.placeholder == "FTEBlock"
    assert OutputType.parse(block.output_type) is OutputType.TABLE_NO_BORDERS
    assert block.conditions[0].value == "0"
    assert block.always_include[0].value_field == "totalFTE"
    assert block.to_dict()["alwaysInclude"] == [{"label": "Total", "valueField": "totalFTE"}]


def test_block_from_dict_with_bad_rules():
    block = DynamicBlock.from_dict({"id": "b1", "conditions": "{oops", "alwaysInclude": None})
    assert block.conditions == []
    assert block.always_include == []


def test_mapping_switch_clears_other_target():
    registry = MappingRegistry()
    registry.set_field("t1", "Salary", "baseSalary")
    m = registry.set_dynamic("t1", "Salary", "b1")
    assert m.type == MappingType.DYNAMIC
    assert m.column is None
    m = registry.set_field("t1", "Salary", "baseSalary")
    assert m.block_id is None
    assert registry.get("t1", "Salary").column == "baseSalary"


def test_mapping_registry_scoped_per_template():
    registry = MappingRegistry()
    registry.set_field("t1", "Name", "name")
    assert registry.get("t2", "Name") is None
    registry.clear("t1", "Name")
    assert registry.get("t1", "Name") is None


def test_mapping_registry_from_dict_accepts_stored_shape():
    registry = MappingRegistry.from_dict({
        "t1": {
            "mappings": [
                {"placeholder": "ProviderName", "mappedColumn": "name"},
                {"placeholder": "FTE", "mappedColumn": "dynamic:b1"},
                {"placeholder": "Unmapped"},
            ]
        },
        "t2": [{"placeholder": "X", "type": "dynamic", "blockId": "b2"}],
    })
    assert registry.get("t1", "ProviderName") == PlaceholderMapping.field("ProviderName", "name")
    assert registry.get("t1", "FTE") == PlaceholderMapping.dynamic("FTE", "b1")
    assert registry.get("t1", "Unmapped") is None
    assert registry.get("t2", "X").block_id == "b2"
    assert len(registry.for_template("t1")) == 2
