from codegen_templates.core.accessors import FieldAccessor
from codegen_templates.core.files import load_template_file, load_templates_from_file
from codegen_templates.core.loader import TemplateLoader, load_defined_templates, load_template
from codegen_templates.core.regions import build_region_tree, iter_regions
from codegen_templates.errors import LexError, ParseError, TemplateError, ValidationError
from codegen_templates.models import (
    DefineDirective,
    Directive,
    ForeachDirective,
    ForeachRegion,
    InsertDirective,
    InsertRegion,
    LoadedTemplate,
    RegionMarker,
    RegionNode,
    ReplaceDirective,
    ReplaceFlags,
    ReplaceRegion,
    TextRange,
)

__all__ = [
    "DefineDirective",
    "Directive",
    "FieldAccessor",
    "ForeachDirective",
    "ForeachRegion",
    "InsertDirective",
    "InsertRegion",
    "LexError",
    "LoadedTemplate",
    "ParseError",
    "RegionMarker",
    "RegionNode",
    "ReplaceDirective",
    "ReplaceFlags",
    "ReplaceRegion",
    "TemplateError",
    "TemplateLoader",
    "TextRange",
    "ValidationError",
    "build_region_tree",
    "iter_regions",
    "load_defined_templates",
    "load_template",
    "load_template_file",
    "load_templates_from_file",
]
