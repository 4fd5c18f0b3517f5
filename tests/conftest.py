import json

import pytest

from contractgen.models import AlwaysIncludeItem, Condition, DynamicBlock
from contractgen.stores import BlockStore, MappingRegistry


@pytest.fixture
def provider():
    return {
        "name": "Dr. A",
        "baseSalary": 280000,
        "clinicalFTE": 0.8,
        "administrativeFte": 0.2,
        "dynamicFields": json.dumps({
            "ClinicalFTE": "0.8",
            "DivisionChiefFTE": "0.3",
            "ResearchFTE": "0.0",
            "TotalFTE": "1.1",
        }),
    }


@pytest.fixture
def fte_block():
    return DynamicBlock(
        id="b-fte",
        name="FTE Breakdown",
        placeholder="FTEBreakdown",
        output_type="bullets",
        conditions=[
            Condition(field="clinicalFTE", operator=">", value="0", label="Clinical FTE"),
            Condition(field="researchFTE", operator=">", value="0", label="Research FTE"),
        ],
        always_include=[AlwaysIncludeItem(label="Admin FTE", value_field="administrativeFte")],
    )


@pytest.fixture
def stores(fte_block):
    blocks = BlockStore([fte_block])
    mappings = MappingRegistry()
    mappings.set_field("schedule-a", "ProviderName", "name")
    mappings.set_field("schedule-a", "BaseSalary", "baseSalary")
    mappings.set_dynamic("schedule-a", "FTEBreakdown", "b-fte")
    return blocks, mappings
