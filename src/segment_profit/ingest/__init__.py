"""Record sources: the synthetic generator and the CSV upload parser."""
