"""HTTP surface for the fitting room engine."""
