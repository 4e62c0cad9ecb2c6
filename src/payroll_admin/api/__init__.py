"""HTTP controller layer for the payroll core."""
