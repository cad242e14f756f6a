"""Test suite for shapecheck.

This package contains tests for:
- Type categorisation and primitive markers
- FieldSpec defaults and immutability
- Schema construction (valid and malformed definitions)
- The validation algorithm (rule precedence, defaults, nesting, positional schemas)
- Event system (emission, serialization)
- Integration scenarios mirroring typical request and config payloads
"""
