"""Standard library function tables, one module per area."""
