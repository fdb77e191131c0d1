"""`subcam` - daily Nmax and Obvs matrices from SUBCAM camera observation logs.

Subpackages:
- conversion: Parsing, normalization, filtering, aggregation, serialization
- contracts: Output invariants enforced after aggregation
- pipeline: Converter entry points and the progress/log reporter
- schemas: Pydantic configuration layers
- cli: Command-line runner
"""

__version__ = "0.1.0"
