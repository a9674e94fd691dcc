"""
Tree-sitter query patterns for C/C++ type declarations.

These patterns extract the user-defined aggregate types and typedef
names declared in a document.
"""

# ============================================================================
# Declaration Query Patterns
# ============================================================================

QUERY_PATTERNS = {
    # Match struct definitions (forward declarations are filtered later)
    "STRUCT": """
        (struct_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)? @body) @aggregate
    """,

    # Match union definitions
    "UNION": """
        (union_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)? @body) @aggregate
    """,

    # Match class definitions
    "CLASS": """
        (class_specifier
            name: (type_identifier) @name
            body: (field_declaration_list)? @body) @aggregate
    """,

    # Match typedef names (the aliased type is checked afterwards)
    "TYPEDEF": """
        (type_definition
            type: (_) @type
            declarator: (type_identifier) @alias) @typedef
    """,
}

# Query name -> declaration kind reported to callers
AGGREGATE_QUERIES = {
    "STRUCT": "struct",
    "UNION": "union",
    "CLASS": "class",
}

# Node types that make a typedef an aggregate alias
AGGREGATE_NODE_KINDS = {
    "struct_specifier": "struct",
    "union_specifier": "union",
    "class_specifier": "class",
}
