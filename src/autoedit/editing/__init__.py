"""Analysis: scoring, hook selection and EDL construction."""
