# contractgen/__init__.py
"""
ContractGen - contract schedule merge engine.

This module provides the core functionality for:
- Resolving provider fields across top-level columns and the dynamicFields blob
- Evaluating numeric inclusion rules for dynamic blocks
- Rendering collected items as bullets, tables or paragraphs
- Merging templates with provider records, one or many at a time

Public API:
-----------
Field resolution:
    resolve(record, field_name) -> Resolution
    FieldResolver(record).resolve(field_name) -> Resolution

Dynamic blocks:
    evaluate(condition, record) -> bool
    collect(conditions, always_include, record) -> List[Item]
    render(items, output_type) -> str

Merge:
    TemplateMerger(blocks, mappings).merge(template_id, text, record) -> MergeResult

Data loading / generation:
    load_csv(path) -> Tuple[List[Dict], List[str]]
    load_google_sheet(url) -> Tuple[List[Dict], List[str]]
    build_preview_rows(records, template_id, text, merger, ...) -> List[Dict]
    generate_documents(records, template_id, text, merger, ...) -> GenerationSummary

The engine performs no I/O outside data loading and generation.
"""

from contractgen.collector import collect, collect_block
from contractgen.data_sources import load_csv, load_google_sheet
from contractgen.errors import BlockNotFound, ContractGenError, PlaceholderConflict
from contractgen.evaluator import evaluate, to_number
from contractgen.generator import GenerationSummary, generate_documents
from contractgen.merge import MergeResult, TemplateMerger, placeholders
from contractgen.models import (
    AlwaysIncludeItem,
    Condition,
    DynamicBlock,
    Item,
    MappingType,
    OutputType,
    PlaceholderMapping,
)
from contractgen.preview import build_preview_rows
from contractgen.renderer import render, render_block
from contractgen.resolver import FieldResolver, Resolution, field_aliases, resolve
from contractgen.stores import BlockStore, MappingRegistry

__all__ = [
    # Field resolution
    "FieldResolver",
    "Resolution",
    "field_aliases",
    "resolve",
    # Dynamic blocks
    "evaluate",
    "to_number",
    "collect",
    "collect_block",
    "render",
    "render_block",
    # Models
    "AlwaysIncludeItem",
    "Condition",
    "DynamicBlock",
    "Item",
    "MappingType",
    "OutputType",
    "PlaceholderMapping",
    # Stores / merge
    "BlockStore",
    "MappingRegistry",
    "TemplateMerger",
    "MergeResult",
    "placeholders",
    # Data loading / generation
    "load_csv",
    "load_google_sheet",
    "build_preview_rows",
    "generate_documents",
    "GenerationSummary",
    # Errors
    "ContractGenError",
    "BlockNotFound",
    "PlaceholderConflict",
]
