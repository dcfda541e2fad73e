"""tsbridge scanners -- regex-driven extraction and rewrite of declarations.

Three transforms live here, each over plain text:

* constants: ``pub const NAME: &str = "...";`` in Rust -> ``const.ts``
* enums: ``export type T = "a" | "b";`` -> ``export enum T { ... }``
* optionals: ``field: T | undefined`` -> ``field?: T``

Usage::

    from tsbridge.scanner import extract_constants, rewrite_optionals

    constants = extract_constants(Path("src/lib.rs").read_text())
    text = rewrite_optionals(text)
"""

from tsbridge.scanner.constants import (
    extract_constants,
    find_all_public_constants,
    process_constants,
    render_constants,
    write_constants,
)
from tsbridge.scanner.enums import (
    find_all_enum_types,
    materialize,
    process_enums,
    render_enum,
    synthesize,
)
from tsbridge.scanner.models import (
    ConstantDeclaration,
    OptionalFieldMatch,
    StageReport,
    UnionTypeDeclaration,
)
from tsbridge.scanner.optionals import process_optionals, rewrite_optionals

__all__ = [
    # Models
    "ConstantDeclaration",
    "UnionTypeDeclaration",
    "OptionalFieldMatch",
    "StageReport",
    # Constants
    "extract_constants",
    "find_all_public_constants",
    "render_constants",
    "write_constants",
    "process_constants",
    # Enums
    "synthesize",
    "render_enum",
    "materialize",
    "find_all_enum_types",
    "process_enums",
    # Optionals
    "rewrite_optionals",
    "process_optionals",
]
