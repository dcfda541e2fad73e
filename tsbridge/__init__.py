"""tsbridge -- keep a TypeScript package in sync with a Rust crate."""

__version__ = "0.1.0"
