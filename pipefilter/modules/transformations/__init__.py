"""
Transformations Module - Black Box Interface

Purpose: Turn raw column values into displayable text
Interface: TransformationsPlugin (get_info, get_name, apply_transformation,
           apply_transformation_no_wrap), TransformationResult, error types
Hidden: Option parsing and merging, program execution

Concrete plugins live in their own modules, e.g.
pipefilter.modules.transformations.text_plain_external.TextPlainExternal.
"""
