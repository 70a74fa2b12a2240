"""catalogprep filters catalog identity records by ordered, pattern based rules."""
