"""
Type bin definitions for the semantic-nullability passes.

These bins drive the wrapping decision for recognized containers:
- list containers: element and container nullability are independent
- nullable containers: nullability is the caller's explicit choice
"""

# Single-argument containers whose element gets its own wrapper.
list_container_type_order = (
    "Vec",
    "VecDeque",
    "HashSet",
    "BTreeSet",
    "LinkedList",
)
list_container_types = frozenset(list_container_type_order)

# Containers that already carry nullability; only the first argument is visited.
nullable_container_type_order = (
    "Option",
    "Result",
)
nullable_container_types = frozenset(nullable_container_type_order)

# All recognized container roots, in matching order.
container_type_order = list_container_type_order + nullable_container_type_order
container_types = frozenset(container_type_order)

# Bin identifiers used by the decider.
LIST_LOGIC_BIN = "list"
NULLABLE_LOGIC_BIN = "nullable"

# Root-name to bin lookup.
container_bin_by_root = dict(
    [(root_name, LIST_LOGIC_BIN) for root_name in list_container_type_order]
    + [(root_name, NULLABLE_LOGIC_BIN) for root_name in nullable_container_type_order]
)

# Subscription fields return `impl Stream<Item = T>`; `T` is the field type.
STREAM_TRAIT_NAME = "Stream"
STREAM_ITEM_NAME = "Item"

# Per-method option attribute and its one flag.
OPTIONS_ATTRIBUTE_NAME = "semantic_nullability"
STRICT_FLAG_NAME = "strict_non_null"

# Appended to the outer attribute arguments so unannotated fields default to semantic nullability.
OUTER_SENTINEL = "semantic_non_null"

# Marker type names exported by the wrapper crate.
SEMANTIC_NON_NULL_NAME = "SemanticNonNull"
STRICT_NON_NULL_NAME = "StrictNonNull"
