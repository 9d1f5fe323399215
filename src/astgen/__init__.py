"""Grammar-driven generator for visitor-pattern AST node classes."""
